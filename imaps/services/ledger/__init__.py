"""
Ledger Domain Services
======================

Services untuk saldo awal, pemasukan, pengeluaran, adjustment dan agregasi pergerakan stok
"""

from .movement_ledger import MovementLedger, MovementTotals
from .goods_service import IncomingGoodService, OutgoingGoodService, AdjustmentService
from .beginning_balance_service import BeginningBalanceService

__all__ = [
    'MovementLedger',
    'MovementTotals',
    'IncomingGoodService',
    'OutgoingGoodService',
    'AdjustmentService',
    'BeginningBalanceService',
]
