"""
Stock Opname Domain Services
============================
"""

from .stock_opname_service import StockOpnameService

__all__ = ['StockOpnameService']
