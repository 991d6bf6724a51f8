"""
Ledger Transaction Schemas
==========================

Schemas untuk payload WMS: pemasukan, pengeluaran, saldo awal, dan adjustment.
"""

from pydantic import Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime
from decimal import Decimal

from .base import BaseSchema, DisplayQty
from .validators import validate_item_code, validate_non_negative_number, validate_positive_number

CustomsDocumentType = Literal[
    'BC23', 'BC27', 'BC40', 'BC30', 'BC25', 'BC41', 'BC261', 'BC262',
    'PPKEKTLDDP', 'PPKEKLDIN', 'PPKEKLDPOUT',
]


class GoodsItemCreateSchema(BaseSchema):
    """Detail barang untuk pemasukan / pengeluaran"""
    item_type: str = Field(min_length=1, max_length=10)
    item_code: str
    item_name: str = Field(min_length=1, max_length=200)
    hs_code: Optional[str] = Field(None, max_length=20)
    uom: str = Field(min_length=1, max_length=20)
    qty: Decimal
    currency: str = Field('USD', min_length=3, max_length=10)
    amount: Decimal = Decimal('0')

    @field_validator('item_code')
    def item_code_format(cls, v):
        return validate_item_code(v)

    @field_validator('qty')
    def qty_positive(cls, v):
        return validate_positive_number(v)

    @field_validator('amount')
    def amount_non_negative(cls, v):
        return validate_non_negative_number(v)


class GoodsItemSchema(BaseSchema):
    id: int
    item_type: str
    item_code: str
    item_name: str
    hs_code: Optional[str] = None
    uom: str
    qty: DisplayQty
    currency: str
    amount: Decimal


class GoodsHeaderBase(BaseSchema):
    wms_id: str = Field(min_length=1, max_length=100)
    owner: int
    customs_document_type: CustomsDocumentType
    ppkek_number: str = Field(min_length=1, max_length=50)
    customs_registration_date: date
    invoice_number: str = Field(min_length=1, max_length=50)
    invoice_date: date


class IncomingGoodCreateSchema(GoodsHeaderBase):
    incoming_evidence_number: str = Field(min_length=1, max_length=50)
    incoming_date: date
    shipper_name: str = Field(min_length=1, max_length=200)
    items: List[GoodsItemCreateSchema] = Field(min_length=1)


class IncomingGoodSchema(GoodsHeaderBase):
    id: int
    company_code: int
    incoming_evidence_number: str
    incoming_date: date
    shipper_name: str
    created_at: Optional[datetime] = None
    items: List[GoodsItemSchema] = []


class OutgoingGoodCreateSchema(GoodsHeaderBase):
    outgoing_evidence_number: str = Field(min_length=1, max_length=50)
    outgoing_date: date
    recipient_name: str = Field(min_length=1, max_length=200)
    items: List[GoodsItemCreateSchema] = Field(min_length=1)


class OutgoingGoodSchema(GoodsHeaderBase):
    id: int
    company_code: int
    outgoing_evidence_number: str
    outgoing_date: date
    recipient_name: str
    created_at: Optional[datetime] = None
    items: List[GoodsItemSchema] = []


class BeginningBalanceCreateSchema(BaseSchema):
    item_code: str
    item_name: str = Field(min_length=1, max_length=200)
    item_type: str = Field(min_length=1, max_length=10)
    uom: str = Field(min_length=1, max_length=20)
    qty: Decimal
    balance_date: date
    remarks: Optional[str] = Field(None, max_length=1000)

    @field_validator('item_code')
    def item_code_format(cls, v):
        return validate_item_code(v)

    @field_validator('qty')
    def qty_non_negative(cls, v):
        return validate_non_negative_number(v)


class BeginningBalanceSchema(BaseSchema):
    id: int
    company_code: int
    item_code: str
    item_name: str
    item_type: str
    uom: str
    qty: DisplayQty
    balance_date: date
    remarks: Optional[str] = None


class AdjustmentItemSchema(BaseSchema):
    id: int
    adjustment_type: Literal['GAIN', 'LOSS']
    item_type: str
    item_code: str
    item_name: str = ''
    uom: str
    qty: DisplayQty
    reason: Optional[str] = None


class AdjustmentSchema(BaseSchema):
    id: int
    wms_id: str
    company_code: int
    internal_evidence_number: str
    transaction_date: date
    source_stock_opname_id: Optional[int] = None
    items: List[AdjustmentItemSchema] = []


class AdjustmentItemCreateSchema(BaseSchema):
    """Baris adjustment dari WMS; arah ditentukan adjustment_type, qty selalu positif"""
    adjustment_type: Literal['GAIN', 'LOSS']
    item_type: str = Field(min_length=1, max_length=10)
    item_code: str
    item_name: str = Field(min_length=1, max_length=200)
    uom: str = Field(min_length=1, max_length=20)
    qty: Decimal
    reason: Optional[str] = Field(None, max_length=500)

    @field_validator('item_code')
    def item_code_format(cls, v):
        return validate_item_code(v)

    @field_validator('qty')
    def qty_positive(cls, v):
        return validate_positive_number(v)


class AdjustmentCreateSchema(BaseSchema):
    wms_id: str = Field(min_length=1, max_length=100)
    wms_doc_type: Optional[str] = Field(None, max_length=100)
    internal_evidence_number: str = Field(min_length=1, max_length=50)
    transaction_date: date
    items: List[AdjustmentItemCreateSchema] = Field(min_length=1)

    @field_validator('transaction_date')
    def not_in_future(cls, v):
        if v > date.today():
            raise ValueError('Transaction date cannot be in the future')
        return v
