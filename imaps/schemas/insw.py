"""
INSW Integration Schemas
========================

Schemas untuk endpoint transmisi INSW dan tracking log.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal, Any
from datetime import datetime

from .base import BaseSchema
from .validators import validate_npwp

TransactionType = Literal['incoming', 'outgoing', 'adjustment', 'stock_opname', 'saldo_awal']
InswStatus = Literal['PENDING', 'SENT', 'SUCCESS', 'FAILED', 'SKIPPED']


class TransmitRequestSchema(BaseSchema):
    transaction_type: TransactionType
    ids: List[int] = Field(min_length=1, description="ID transaksi sumber")

    @field_validator('ids')
    def ids_positive(cls, v):
        if any(i <= 0 for i in v):
            raise ValueError('ids must be positive integers')
        return v


class RetryRequestSchema(BaseSchema):
    transaction_type: TransactionType
    max_retries: Optional[int] = Field(None, ge=1, le=20)


class CleansingRequestSchema(BaseSchema):
    npwp: str

    @field_validator('npwp')
    def npwp_format(cls, v):
        return validate_npwp(v)


class TransmissionLogSchema(BaseSchema):
    id: int
    transaction_type: str
    transaction_id: int
    wms_id: Optional[str] = None
    company_code: int
    insw_status: str
    insw_activity_code: Optional[str] = None
    insw_request_payload: Optional[Any] = None
    insw_response: Optional[Any] = None
    insw_error: Optional[str] = None
    error_kind: Optional[str] = None
    sent_at: Optional[datetime] = None
    retry_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TransmissionResultSchema(BaseModel):
    """Hasil per record dalam satu batch"""
    id: int
    wms_id: Optional[str] = None
    status: Literal['success', 'failed', 'skipped']
    insw_status: InswStatus
    insw_response: Optional[Any] = None
    error: Optional[str] = None


class BatchTransmissionSchema(BaseModel):
    status: Literal['success', 'partial', 'failed']
    message: str
    total: int
    success_count: int
    failed_count: int
    skipped_count: int
    results: List[TransmissionResultSchema] = []
