"""
Schemas Package
===============

Pydantic schemas untuk serialization dan validation
"""

from .base import (
    BaseSchema,
    PaginationSchema,
    TimestampMixin,
    DisplayQty,
    round_display_qty,
)

# ==================== MASTER DOMAIN ====================
from .master import (
    CompanySchema, CompanyCreateSchema, CompanyUpdateSchema,
    CurrencySchema, CurrencyCreateSchema, CurrencyUpdateSchema,
    CustomerSchema, CustomerCreateSchema, CustomerUpdateSchema,
    SupplierSchema, SupplierCreateSchema, SupplierUpdateSchema,
    UOMSchema, UOMCreateSchema, UOMUpdateSchema,
    ItemTypeSchema,
)

# ==================== LEDGER DOMAIN ====================
from .transaction import (
    GoodsItemCreateSchema, GoodsItemSchema,
    IncomingGoodCreateSchema, IncomingGoodSchema,
    OutgoingGoodCreateSchema, OutgoingGoodSchema,
    BeginningBalanceCreateSchema, BeginningBalanceSchema,
    AdjustmentSchema, AdjustmentItemSchema,
    AdjustmentCreateSchema, AdjustmentItemCreateSchema,
)

# ==================== STOCK OPNAME DOMAIN ====================
from .stock_opname import (
    StockOpnameItemInputSchema, StockOpnameCreateSchema, StockOpnameUpdateSchema,
    StockOpnameItemSchema, StockOpnameSchema,
)

# ==================== INTEGRATION DOMAIN ====================
from .insw import (
    TransactionType, InswStatus,
    TransmitRequestSchema, RetryRequestSchema, CleansingRequestSchema,
    TransmissionLogSchema, TransmissionResultSchema, BatchTransmissionSchema,
)

# ==================== REPORTING DOMAIN ====================
from .report import MutationRowSchema, MutationReportSchema

# ==================== USER DOMAIN ====================
from .user import UserSchema, UserCreateSchema, LoginSchema, LoginResponseSchema

__all__ = [
    'BaseSchema', 'PaginationSchema', 'TimestampMixin', 'DisplayQty', 'round_display_qty',

    'CompanySchema', 'CompanyCreateSchema', 'CompanyUpdateSchema',
    'CurrencySchema', 'CurrencyCreateSchema', 'CurrencyUpdateSchema',
    'CustomerSchema', 'CustomerCreateSchema', 'CustomerUpdateSchema',
    'SupplierSchema', 'SupplierCreateSchema', 'SupplierUpdateSchema',
    'UOMSchema', 'UOMCreateSchema', 'UOMUpdateSchema',
    'ItemTypeSchema',

    'GoodsItemCreateSchema', 'GoodsItemSchema',
    'IncomingGoodCreateSchema', 'IncomingGoodSchema',
    'OutgoingGoodCreateSchema', 'OutgoingGoodSchema',
    'BeginningBalanceCreateSchema', 'BeginningBalanceSchema',
    'AdjustmentSchema', 'AdjustmentItemSchema', 'AdjustmentCreateSchema', 'AdjustmentItemCreateSchema',

    'StockOpnameItemInputSchema', 'StockOpnameCreateSchema', 'StockOpnameUpdateSchema',
    'StockOpnameItemSchema', 'StockOpnameSchema',

    'TransactionType', 'InswStatus', 'TransmitRequestSchema', 'RetryRequestSchema', 'CleansingRequestSchema',
    'TransmissionLogSchema', 'TransmissionResultSchema', 'BatchTransmissionSchema',

    'MutationRowSchema', 'MutationReportSchema',

    'UserSchema', 'UserCreateSchema', 'LoginSchema', 'LoginResponseSchema',
]
