"""
Integration Models
==================

Tracking log transmisi data ke INSW (satu baris per transaksi sumber).
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, UniqueConstraint, Index

from .base import BaseModel


class InswTrackingLog(BaseModel):
    """Status transmisi INSW per transaksi sumber; tidak pernah dihapus (audit trail)"""
    __tablename__ = 'insw_tracking_log'
    __table_args__ = (
        UniqueConstraint('company_code', 'transaction_type', 'transaction_id',
                         name='uq_insw_tracking_transaction'),
        Index('idx_insw_tracking_status', 'insw_status', 'company_code'),
    )

    # Referensi transaksi sumber
    transaction_type = Column(String(20), nullable=False)  # incoming, outgoing, adjustment, stock_opname, saldo_awal
    transaction_id = Column(Integer, nullable=False)
    wms_id = Column(String(100), index=True)
    company_code = Column(Integer, nullable=False, index=True)

    insw_status = Column(String(20), nullable=False, default='PENDING')
    insw_activity_code = Column(String(10))  # 30, 31, 32, 33

    insw_request_payload = Column(JSON)
    insw_response = Column(JSON)
    insw_error = Column(Text)
    error_kind = Column(String(20))  # validation, transport, rejected

    sent_at = Column(DateTime)
    retry_count = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<InswTrackingLog {self.transaction_type}#{self.transaction_id} - {self.insw_status}>'
