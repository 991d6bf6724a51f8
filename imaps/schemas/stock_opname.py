"""
Stock Opname Schemas
====================

Request/response schemas untuk stock opname WMS (POST / PATCH / GET).
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import date, datetime
from decimal import Decimal

from .base import BaseSchema, DisplayQty
from .validators import validate_item_code, validate_non_negative_number


class StockOpnameItemInputSchema(BaseSchema):
    """Hasil hitung fisik satu item"""
    item_code: str
    item_type: str = Field(min_length=1, max_length=10)
    physical_qty: Decimal
    uom: str = Field(min_length=1, max_length=20)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator('item_code')
    def item_code_format(cls, v):
        return validate_item_code(v)

    @field_validator('physical_qty')
    def physical_qty_non_negative(cls, v):
        return validate_non_negative_number(v)


def _check_unique_lines(items):
    seen = set()
    for item in items or []:
        key = (item.item_code, item.item_type, item.uom)
        if key in seen:
            raise ValueError(f"Duplicate item line: {item.item_code} / {item.item_type} / {item.uom}")
        seen.add(key)


class StockOpnameCreateSchema(BaseSchema):
    wms_id: str = Field(min_length=1, max_length=100)
    owner: Optional[int] = None
    document_date: date
    notes: Optional[str] = Field(None, max_length=500)
    items: List[StockOpnameItemInputSchema] = Field(min_length=1)

    @model_validator(mode='after')
    def unique_item_lines(self):
        _check_unique_lines(self.items)
        return self


class StockOpnameUpdateSchema(BaseSchema):
    """PATCH: transisi status, opsional ganti items sebelum konfirmasi"""
    wms_id: str = Field(min_length=1, max_length=100)
    status: Literal['CONFIRMED', 'CANCELLED']
    items: Optional[List[StockOpnameItemInputSchema]] = Field(None, min_length=1)
    notes: Optional[str] = Field(None, max_length=500)

    @model_validator(mode='after')
    def unique_item_lines(self):
        _check_unique_lines(self.items)
        return self


class StockOpnameItemSchema(BaseSchema):
    id: int
    item_code: str
    item_name: Optional[str] = None
    item_type: str
    uom: str
    beginning_qty: DisplayQty
    incoming_qty_on_date: DisplayQty
    outgoing_qty_on_date: DisplayQty
    system_qty: DisplayQty
    physical_qty: DisplayQty
    variance_qty: DisplayQty
    adjustment_qty_signed: DisplayQty
    adjustment_type: Optional[Literal['GAIN', 'LOSS']] = None
    notes: Optional[str] = None


class StockOpnameSchema(BaseSchema):
    id: int
    wms_id: str
    company_code: int
    owner: Optional[int] = None
    document_date: date
    status: Literal['ACTIVE', 'CONFIRMED', 'CANCELLED']
    notes: Optional[str] = None
    created_by: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: List[StockOpnameItemSchema] = []
