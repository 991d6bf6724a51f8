"""
Ledger Routes
=============

Routes untuk ingest WMS dan saldo awal
"""

from .goods_routes import incoming_router, outgoing_router, adjustment_router
from .beginning_balance_routes import beginning_balance_router

__all__ = ['incoming_router', 'outgoing_router', 'adjustment_router', 'beginning_balance_router']
