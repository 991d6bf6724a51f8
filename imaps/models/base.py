from sqlalchemy import Column, DateTime, Integer
from datetime import datetime

from ..database import Base

# BaseModel dengan kolom umum supaya tidak diulang di tiap model.
# Abstract class; tidak dibuat sebagai tabel.
class BaseModel(Base):
    __abstract__ = True
    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
