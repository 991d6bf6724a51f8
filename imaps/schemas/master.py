"""
Master Data Schemas
===================

Schemas untuk Company, Currency, Customer, Supplier, UOM dan ItemType.
Satu schema kanonik per resource.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

from .base import BaseSchema, TimestampMixin
from .validators import validate_master_code, validate_company_code, validate_npwp


# ==================== COMPANY ====================

class CompanyBase(BaseSchema):
    code: int
    name: str = Field(min_length=1, max_length=200)
    npwp: Optional[str] = None
    status: Literal['ACTIVE', 'INACTIVE'] = 'ACTIVE'

    @field_validator('code')
    def company_code_positive(cls, v):
        return validate_company_code(v)

    @field_validator('npwp')
    def npwp_format(cls, v):
        return validate_npwp(v)


class CompanyCreateSchema(CompanyBase):
    pass


class CompanyUpdateSchema(BaseSchema):
    code: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    npwp: Optional[str] = None
    status: Optional[Literal['ACTIVE', 'INACTIVE']] = None

    @field_validator('code')
    def company_code_positive(cls, v):
        return validate_company_code(v) if v is not None else v

    @field_validator('npwp')
    def npwp_format(cls, v):
        return validate_npwp(v)


class CompanySchema(CompanyBase, TimestampMixin):
    id: int


# ==================== CODE + NAME RESOURCES ====================

class CodeNameBase(BaseSchema):
    """Base untuk resource master sederhana (code + name)"""
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)

    @field_validator('code')
    def code_format(cls, v):
        return validate_master_code(v)


class CodeNameUpdateBase(BaseSchema):
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=200)

    @field_validator('code')
    def code_format(cls, v):
        return validate_master_code(v) if v is not None else v


class CurrencyCreateSchema(CodeNameBase):
    code: str = Field(min_length=3, max_length=10)


class CurrencyUpdateSchema(CodeNameUpdateBase):
    code: Optional[str] = Field(None, min_length=3, max_length=10)


class CurrencySchema(CodeNameBase, TimestampMixin):
    id: int


class CustomerCreateSchema(CodeNameBase):
    address: Optional[str] = None


class CustomerUpdateSchema(CodeNameUpdateBase):
    address: Optional[str] = None


class CustomerSchema(CodeNameBase, TimestampMixin):
    id: int
    address: Optional[str] = None


class SupplierCreateSchema(CodeNameBase):
    address: Optional[str] = None


class SupplierUpdateSchema(CodeNameUpdateBase):
    address: Optional[str] = None


class SupplierSchema(CodeNameBase, TimestampMixin):
    id: int
    address: Optional[str] = None


class UOMCreateSchema(CodeNameBase):
    code: str = Field(min_length=1, max_length=20)


class UOMUpdateSchema(CodeNameUpdateBase):
    code: Optional[str] = Field(None, min_length=1, max_length=20)


class UOMSchema(CodeNameBase, TimestampMixin):
    id: int


# ==================== ITEM TYPE ====================

class ItemTypeSchema(BaseSchema):
    """Read-only; diisi lewat seed"""
    item_type_code: str
    name_en: str
    name_id: Optional[str] = None
    category: str
    description: Optional[str] = None
    is_active: bool = True
    sort_order: Optional[int] = None
    created_at: Optional[datetime] = None
