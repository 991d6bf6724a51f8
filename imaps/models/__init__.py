"""
iMAPS Models Package
====================

Database models untuk aplikasi inventory kawasan berikat.

Domain Structure:
- Master: Company, Currency, Customer, Supplier, UOM, ItemType
- Ledger: BeginningBalance, IncomingGood, OutgoingGood, Adjustment
- Stock Opname: StockOpname, StockOpnameItem
- Integration: InswTrackingLog
- User & Audit: User, AuditLog
"""

# ==================== CORE IMPORTS ====================

from .base import BaseModel
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from datetime import datetime

# ==================== MASTER DOMAIN ====================

from .master import (
    Company,
    Currency,
    Customer,
    Supplier,
    UOM,
    ItemType,
)

# ==================== LEDGER DOMAIN ====================

from .transaction import (
    BeginningBalance,
    IncomingGood,
    IncomingGoodItem,
    OutgoingGood,
    OutgoingGoodItem,
    Adjustment,
    AdjustmentItem,
)

# ==================== STOCK OPNAME DOMAIN ====================

from .stock_opname import (
    StockOpname,
    StockOpnameItem,
)

# ==================== INTEGRATION DOMAIN ====================

from .integration import (
    InswTrackingLog,
)

# ==================== USER DOMAIN ====================

from .user import User

# ==================== AUDIT & LOGGING MODELS ====================

class AuditLog(BaseModel):
    """Model untuk Audit Trail semua perubahan data"""
    __tablename__ = 'audit_logs'

    # Event information
    entity_type = Column(String(50), nullable=False, index=True)  # Currency, StockOpname, etc
    entity_id = Column(Integer, nullable=False, index=True)
    action = Column(String(30), nullable=False, index=True)  # CREATE, UPDATE, DELETE, CONFIRM

    # User information
    user_id = Column(Integer, nullable=True)
    username = Column(String(50))

    # Change details
    old_values = Column(JSON)
    new_values = Column(JSON)

    request_id = Column(String(36))
    notes = Column(Text)
    severity = Column(String(10), default='INFO')  # INFO, WARN, ERROR

    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<AuditLog {self.entity_type}({self.entity_id}) - {self.action}>'

    def to_dict(self):
        return {
            'id': self.id,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'action': self.action,
            'username': self.username,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'notes': self.notes
        }


__all__ = [
    'BaseModel',
    'Company', 'Currency', 'Customer', 'Supplier', 'UOM', 'ItemType',
    'BeginningBalance', 'IncomingGood', 'IncomingGoodItem',
    'OutgoingGood', 'OutgoingGoodItem', 'Adjustment', 'AdjustmentItem',
    'StockOpname', 'StockOpnameItem',
    'InswTrackingLog',
    'User', 'AuditLog',
]
