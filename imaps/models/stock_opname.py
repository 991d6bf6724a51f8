"""
Stock Opname Models
===================

Header + item untuk perhitungan fisik stok (stock opname) dari WMS.
Status: ACTIVE -> CONFIRMED | CANCELLED (keduanya terminal).
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, Date, DateTime, Numeric, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import BaseModel

QTY = Numeric(15, 3)


class StockOpname(BaseModel):
    __tablename__ = 'stock_opnames'
    __table_args__ = (UniqueConstraint('company_code', 'wms_id', name='uq_stock_opnames_company_wms'),)

    wms_id = Column(String(100), nullable=False, index=True)
    company_code = Column(Integer, nullable=False, index=True)
    owner = Column(Integer)
    document_date = Column(Date, nullable=False)
    status = Column(String(10), nullable=False, default='ACTIVE', index=True)
    notes = Column(Text)
    checksum = Column(String(64))
    created_by = Column(String(100))
    confirmed_at = Column(DateTime)
    cancelled_at = Column(DateTime)

    items = relationship('StockOpnameItem', back_populates='stock_opname',
                         cascade='all, delete-orphan', lazy='selectin',
                         order_by='StockOpnameItem.id')

    def __repr__(self):
        return f'<StockOpname {self.wms_id} ({self.status})>'


class StockOpnameItem(BaseModel):
    __tablename__ = 'stock_opname_items'

    stock_opname_id = Column(Integer, ForeignKey('stock_opnames.id'), nullable=False, index=True)
    company_code = Column(Integer, nullable=False)
    item_code = Column(String(50), nullable=False, index=True)
    item_name = Column(String(200))
    item_type = Column(String(10), nullable=False)
    uom = Column(String(20), nullable=False)

    # Snapshot ledger per document_date
    beginning_qty = Column(QTY, nullable=False)
    incoming_qty_on_date = Column(QTY, nullable=False)
    outgoing_qty_on_date = Column(QTY, nullable=False)
    system_qty = Column(QTY, nullable=False)

    physical_qty = Column(QTY, nullable=False)
    variance_qty = Column(QTY, nullable=False)
    adjustment_qty_signed = Column(QTY, nullable=False)
    adjustment_type = Column(String(10))  # GAIN, LOSS, None
    notes = Column(Text)

    stock_opname = relationship('StockOpname', back_populates='items')
