"""
Report Schemas
==============

Schemas untuk laporan mutasi barang.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime

from .base import DisplayQty


class MutationRowSchema(BaseModel):
    item_code: str
    item_name: Optional[str] = None
    item_type: str
    uom: str
    beginning: DisplayQty
    incoming: DisplayQty
    outgoing: DisplayQty
    adjustment: DisplayQty
    ending: DisplayQty


class MutationReportSchema(BaseModel):
    company_code: int
    start_date: date
    end_date: date
    item_type: Optional[str] = None
    generated_at: Optional[datetime] = None
    rows: List[MutationRowSchema] = []
