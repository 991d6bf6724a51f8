"""
Ledger / Transaction Models
===========================

Sumber pergerakan stok: saldo awal, pemasukan, pengeluaran, dan adjustment.
Semua kuantitas disimpan sebagai Decimal(15,3).
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, Date, DateTime, Numeric, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime

from .base import BaseModel

QTY = Numeric(15, 3)
AMOUNT = Numeric(18, 4)

CUSTOMS_DOCUMENT_TYPES = (
    'BC23', 'BC27', 'BC40', 'BC30', 'BC25', 'BC41', 'BC261', 'BC262',
    'PPKEKTLDDP', 'PPKEKLDIN', 'PPKEKLDPOUT',
)


class BeginningBalance(BaseModel):
    """Saldo awal per item"""
    __tablename__ = 'beginning_balances'

    company_code = Column(Integer, nullable=False, index=True)
    item_code = Column(String(50), nullable=False, index=True)
    item_name = Column(String(200), nullable=False)
    item_type = Column(String(10), nullable=False)
    uom = Column(String(20), nullable=False)
    qty = Column(QTY, nullable=False)
    balance_date = Column(Date, nullable=False)
    remarks = Column(String(1000))

    def __repr__(self):
        return f'<BeginningBalance {self.company_code}:{self.item_code} {self.qty}>'


class IncomingGood(BaseModel):
    """Header dokumen pemasukan barang"""
    __tablename__ = 'incoming_goods'
    __table_args__ = (UniqueConstraint('company_code', 'wms_id', name='uq_incoming_goods_company_wms'),)

    wms_id = Column(String(100), nullable=False)
    company_code = Column(Integer, nullable=False, index=True)
    owner = Column(Integer, nullable=False)
    customs_document_type = Column(String(20), nullable=False)
    ppkek_number = Column(String(50), nullable=False)
    customs_registration_date = Column(Date, nullable=False)
    incoming_evidence_number = Column(String(50), nullable=False)
    incoming_date = Column(Date, nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False)
    invoice_date = Column(Date, nullable=False)
    shipper_name = Column(String(200), nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    items = relationship('IncomingGoodItem', back_populates='incoming_good',
                         cascade='all, delete-orphan', lazy='selectin')

    def __repr__(self):
        return f'<IncomingGood {self.wms_id}>'


class IncomingGoodItem(BaseModel):
    __tablename__ = 'incoming_good_items'

    incoming_good_id = Column(Integer, ForeignKey('incoming_goods.id'), nullable=False, index=True)
    item_type = Column(String(10), nullable=False)
    item_code = Column(String(50), nullable=False, index=True)
    item_name = Column(String(200), nullable=False)
    hs_code = Column(String(20))
    uom = Column(String(20), nullable=False)
    qty = Column(QTY, nullable=False)
    currency = Column(String(10), nullable=False, default='USD')
    amount = Column(AMOUNT, nullable=False, default=0)

    incoming_good = relationship('IncomingGood', back_populates='items')


class OutgoingGood(BaseModel):
    """Header dokumen pengeluaran barang"""
    __tablename__ = 'outgoing_goods'
    __table_args__ = (UniqueConstraint('company_code', 'wms_id', name='uq_outgoing_goods_company_wms'),)

    wms_id = Column(String(100), nullable=False)
    company_code = Column(Integer, nullable=False, index=True)
    owner = Column(Integer, nullable=False)
    customs_document_type = Column(String(20), nullable=False)
    ppkek_number = Column(String(50), nullable=False)
    customs_registration_date = Column(Date, nullable=False)
    outgoing_evidence_number = Column(String(50), nullable=False)
    outgoing_date = Column(Date, nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False)
    invoice_date = Column(Date, nullable=False)
    recipient_name = Column(String(200), nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    items = relationship('OutgoingGoodItem', back_populates='outgoing_good',
                         cascade='all, delete-orphan', lazy='selectin')

    def __repr__(self):
        return f'<OutgoingGood {self.wms_id}>'


class OutgoingGoodItem(BaseModel):
    __tablename__ = 'outgoing_good_items'

    outgoing_good_id = Column(Integer, ForeignKey('outgoing_goods.id'), nullable=False, index=True)
    item_type = Column(String(10), nullable=False)
    item_code = Column(String(50), nullable=False, index=True)
    item_name = Column(String(200), nullable=False)
    hs_code = Column(String(20))
    uom = Column(String(20), nullable=False)
    qty = Column(QTY, nullable=False)
    currency = Column(String(10), nullable=False, default='USD')
    amount = Column(AMOUNT, nullable=False, default=0)

    outgoing_good = relationship('OutgoingGood', back_populates='items')


class Adjustment(BaseModel):
    """Header adjustment; dikirim WMS atau dibuat otomatis saat stock opname dikonfirmasi"""
    __tablename__ = 'adjustments'

    wms_id = Column(String(100), nullable=False, index=True)
    company_code = Column(Integer, nullable=False, index=True)
    wms_doc_type = Column(String(100))
    internal_evidence_number = Column(String(100), nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    source_stock_opname_id = Column(Integer, ForeignKey('stock_opnames.id'), nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow)

    items = relationship('AdjustmentItem', back_populates='adjustment',
                         cascade='all, delete-orphan', lazy='selectin')

    def __repr__(self):
        return f'<Adjustment {self.internal_evidence_number}>'


class AdjustmentItem(BaseModel):
    __tablename__ = 'adjustment_items'

    adjustment_id = Column(Integer, ForeignKey('adjustments.id'), nullable=False, index=True)
    adjustment_type = Column(String(10), nullable=False)  # GAIN, LOSS
    item_type = Column(String(10), nullable=False)
    item_code = Column(String(50), nullable=False, index=True)
    item_name = Column(String(200), nullable=False, default='')
    uom = Column(String(20), nullable=False)
    qty = Column(QTY, nullable=False)  # selalu non-negatif; arah ditentukan adjustment_type
    reason = Column(String(500))

    adjustment = relationship('Adjustment', back_populates='items')
