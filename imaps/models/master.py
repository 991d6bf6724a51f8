"""
Master Data Models
==================

Company, Currency, Customer, Supplier, UOM dan ItemType.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from datetime import datetime

from .base import BaseModel
from ..database import Base


class Company(BaseModel):
    """Perusahaan di kawasan berikat; `code` dipakai sebagai company_code di semua transaksi"""
    __tablename__ = 'companies'

    code = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    npwp = Column(String(30))
    status = Column(String(10), nullable=False, default='ACTIVE')  # ACTIVE, INACTIVE

    def __repr__(self):
        return f'<Company {self.code} - {self.name}>'


class Currency(BaseModel):
    __tablename__ = 'currencies'

    code = Column(String(10), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)

    def __repr__(self):
        return f'<Currency {self.code}>'


class Customer(BaseModel):
    __tablename__ = 'customers'

    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(Text)

    def __repr__(self):
        return f'<Customer {self.code} - {self.name}>'


class Supplier(BaseModel):
    __tablename__ = 'suppliers'

    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(Text)

    def __repr__(self):
        return f'<Supplier {self.code} - {self.name}>'


class UOM(BaseModel):
    """Unit of measure"""
    __tablename__ = 'uoms'

    code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)

    def __repr__(self):
        return f'<UOM {self.code}>'


class ItemType(Base):
    """Jenis barang (ROH, HALB, FERT, SCRAP, ...); primary key = item_type_code"""
    __tablename__ = 'item_types'

    item_type_code = Column(String(10), primary_key=True)
    name_en = Column(String(100), nullable=False)
    name_id = Column(String(100))
    category = Column(String(50), nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<ItemType {self.item_type_code}>'
