"""
Transmission Repository
=======================

Akses data untuk orchestrator INSW: tracking log per transaksi sumber dan
pemuatan transaksi sumbernya. Ada dua implementasi:

- SqlAlchemyTransmissionRepository: dipakai aplikasi (AsyncSession)
- InMemoryTransmissionRepository: dipakai unit test orchestrator

Transisi status selalu conditional (compare-and-swap pada insw_status) supaya
dua request paralel tidak bisa menandai record yang sama dua kali.

Claim mengembalikan timestamp sent_at yang dipakai sebagai token: SUCCESS /
FAILED hanya ditulis kalau row masih SENT dengan sent_at yang sama. Row SENT
yang sent_at-nya lebih lama dari stale_before boleh di-claim ulang.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import (
    InswTrackingLog, IncomingGood, OutgoingGood, Adjustment, StockOpname,
    BeginningBalance, Company,
)
from .converter import ACTIVITY_CODES

CLAIMABLE_STATUSES = ('PENDING', 'FAILED')

SOURCE_MODELS = {
    'incoming': IncomingGood,
    'outgoing': OutgoingGood,
    'adjustment': Adjustment,
    'stock_opname': StockOpname,
    'saldo_awal': BeginningBalance,
}


def source_wms_id(transaction_type: str, source) -> Optional[str]:
    """wms_id transaksi sumber; saldo awal tidak punya wms_id"""
    if source is None:
        return None
    if transaction_type == 'saldo_awal':
        return f"SAL-{source.item_code}"
    return getattr(source, 'wms_id', None)


class TransmissionRepository(ABC):
    """Interface repository yang dipakai TransmissionService"""

    @abstractmethod
    async def get_record(self, company_code: int, transaction_type: str,
                         transaction_id: int) -> Optional[InswTrackingLog]:
        ...

    @abstractmethod
    async def queue(self, company_code: int, transaction_type: str, transaction_id: int,
                    wms_id: Optional[str]) -> InswTrackingLog:
        """Buat tracking row PENDING kalau belum ada; return row yang ada kalau sudah"""

    @abstractmethod
    async def claim(self, record_id: int, stale_before: datetime = None) -> Optional[datetime]:
        """
        PENDING|FAILED (atau SENT yang basi) -> SENT.

        Return sent_at baru sebagai token claim, None kalau request lain
        sudah memegang atau menyelesaikan record ini.
        """

    @abstractmethod
    async def mark_success(self, record_id: int, claimed_at: datetime, payload: Dict[str, Any],
                           response: Dict[str, Any]) -> bool:
        """SENT (claim yang sama) -> SUCCESS, simpan response, retry_count = 0"""

    @abstractmethod
    async def mark_failed(self, record_id: int, claimed_at: datetime, payload: Optional[Dict[str, Any]],
                          error: str, error_kind: str, response: Any = None) -> bool:
        """SENT (claim yang sama) -> FAILED, simpan error, retry_count + 1"""

    @abstractmethod
    async def load_source(self, company_code: int, transaction_type: str, transaction_id: int):
        ...

    @abstractmethod
    async def get_company_name(self, company_code: int) -> Optional[str]:
        ...

    @abstractmethod
    async def list_retryable(self, company_code: int, transaction_type: str,
                             max_retries: int, stale_before: datetime = None) -> List[int]:
        """
        transaction_id FAILED (bukan validation) dengan retry_count < max_retries,
        ditambah row SENT yang basi.
        """

    @abstractmethod
    async def list_logs(self, company_code: int, transaction_type: str = None,
                        insw_status: str = None, limit: int = 100) -> List[InswTrackingLog]:
        ...

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


class SqlAlchemyTransmissionRepository(TransmissionRepository):
    """Implementasi repository di atas tabel insw_tracking_log"""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def get_record(self, company_code, transaction_type, transaction_id):
        result = await self.db_session.execute(
            select(InswTrackingLog)
            .where(
                InswTrackingLog.company_code == company_code,
                InswTrackingLog.transaction_type == transaction_type,
                InswTrackingLog.transaction_id == transaction_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def queue(self, company_code, transaction_type, transaction_id, wms_id):
        existing = await self.get_record(company_code, transaction_type, transaction_id)
        if existing:
            return existing

        now = datetime.utcnow()
        record = InswTrackingLog(
            transaction_type=transaction_type,
            transaction_id=transaction_id,
            wms_id=wms_id,
            company_code=company_code,
            insw_status='PENDING',
            insw_activity_code=ACTIVITY_CODES.get(transaction_type),
            retry_count=0,
            created_at=now,
            updated_at=now,
        )
        self.db_session.add(record)
        await self.db_session.flush()
        return record

    async def _transition(self, record_id: int, condition, values: Dict[str, Any]) -> bool:
        values.setdefault('updated_at', datetime.utcnow())
        result = await self.db_session.execute(
            update(InswTrackingLog)
            .where(InswTrackingLog.id == record_id, condition)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def _held_by(claimed_at: datetime):
        return and_(InswTrackingLog.insw_status == 'SENT', InswTrackingLog.sent_at == claimed_at)

    async def claim(self, record_id, stale_before=None):
        condition = InswTrackingLog.insw_status.in_(CLAIMABLE_STATUSES)
        if stale_before is not None:
            condition = or_(condition, and_(InswTrackingLog.insw_status == 'SENT',
                                            InswTrackingLog.sent_at < stale_before))

        claimed_at = datetime.utcnow()
        if await self._transition(record_id, condition, {'insw_status': 'SENT', 'sent_at': claimed_at}):
            return claimed_at
        return None

    async def mark_success(self, record_id, claimed_at, payload, response):
        return await self._transition(record_id, self._held_by(claimed_at), {
            'insw_status': 'SUCCESS',
            'insw_request_payload': payload,
            'insw_response': response,
            'insw_error': None,
            'error_kind': None,
            'retry_count': 0,
        })

    async def mark_failed(self, record_id, claimed_at, payload, error, error_kind, response=None):
        return await self._transition(record_id, self._held_by(claimed_at), {
            'insw_status': 'FAILED',
            'insw_request_payload': payload,
            'insw_response': response,
            'insw_error': error,
            'error_kind': error_kind,
            'retry_count': InswTrackingLog.retry_count + 1,
        })

    async def load_source(self, company_code, transaction_type, transaction_id):
        model = SOURCE_MODELS.get(transaction_type)
        if model is None:
            return None
        result = await self.db_session.execute(
            select(model).where(model.id == transaction_id, model.company_code == company_code)
        )
        return result.scalars().first()

    async def get_company_name(self, company_code):
        result = await self.db_session.execute(select(Company.name).where(Company.code == company_code))
        return result.scalars().first()

    async def list_retryable(self, company_code, transaction_type, max_retries, stale_before=None):
        retryable = and_(
            InswTrackingLog.insw_status == 'FAILED',
            (InswTrackingLog.error_kind.is_(None)) | (InswTrackingLog.error_kind != 'validation'),
        )
        if stale_before is not None:
            retryable = or_(retryable, and_(InswTrackingLog.insw_status == 'SENT',
                                            InswTrackingLog.sent_at < stale_before))

        result = await self.db_session.execute(
            select(InswTrackingLog.transaction_id)
            .where(
                InswTrackingLog.company_code == company_code,
                InswTrackingLog.transaction_type == transaction_type,
                InswTrackingLog.retry_count < max_retries,
                retryable,
            )
            .order_by(InswTrackingLog.id.asc())
        )
        return list(result.scalars().all())

    async def list_logs(self, company_code, transaction_type=None, insw_status=None, limit=100):
        query = select(InswTrackingLog).where(InswTrackingLog.company_code == company_code)
        if transaction_type:
            query = query.where(InswTrackingLog.transaction_type == transaction_type)
        if insw_status:
            query = query.where(InswTrackingLog.insw_status == insw_status)
        query = query.order_by(InswTrackingLog.updated_at.desc(), InswTrackingLog.id.desc()).limit(limit)

        result = await self.db_session.execute(query)
        return list(result.scalars().all())

    async def commit(self):
        await self.db_session.commit()

    async def rollback(self):
        await self.db_session.rollback()


def _is_stale(record: InswTrackingLog, stale_before: Optional[datetime]) -> bool:
    return (stale_before is not None and record.insw_status == 'SENT'
            and record.sent_at is not None and record.sent_at < stale_before)


class InMemoryTransmissionRepository(TransmissionRepository):
    """Repository in-memory; sumber transaksi didaftarkan lewat add_source()"""

    def __init__(self, company_names: Dict[int, str] = None):
        self.records: Dict[int, InswTrackingLog] = {}
        self.sources: Dict[Tuple[int, str, int], Any] = {}
        self.company_names = dict(company_names or {})
        self._next_id = 1

    def add_source(self, company_code: int, transaction_type: str, transaction_id: int, source) -> None:
        self.sources[(company_code, transaction_type, transaction_id)] = source

    def _find(self, company_code, transaction_type, transaction_id):
        for record in self.records.values():
            if (record.company_code, record.transaction_type, record.transaction_id) == \
                    (company_code, transaction_type, transaction_id):
                return record
        return None

    async def get_record(self, company_code, transaction_type, transaction_id):
        return self._find(company_code, transaction_type, transaction_id)

    async def queue(self, company_code, transaction_type, transaction_id, wms_id):
        existing = self._find(company_code, transaction_type, transaction_id)
        if existing:
            return existing

        now = datetime.utcnow()
        record = InswTrackingLog(
            id=self._next_id,
            transaction_type=transaction_type,
            transaction_id=transaction_id,
            wms_id=wms_id,
            company_code=company_code,
            insw_status='PENDING',
            insw_activity_code=ACTIVITY_CODES.get(transaction_type),
            retry_count=0,
            created_at=now,
            updated_at=now,
        )
        self.records[record.id] = record
        self._next_id += 1
        return record

    def _transition(self, record_id, condition: Callable[[InswTrackingLog], bool], values) -> bool:
        record = self.records.get(record_id)
        if record is None or not condition(record):
            return False
        for key, value in values.items():
            setattr(record, key, value)
        record.updated_at = datetime.utcnow()
        return True

    @staticmethod
    def _held_by(claimed_at):
        return lambda record: record.insw_status == 'SENT' and record.sent_at == claimed_at

    async def claim(self, record_id, stale_before=None):
        claimed_at = datetime.utcnow()
        claimable = lambda record: (record.insw_status in CLAIMABLE_STATUSES
                                    or _is_stale(record, stale_before))
        if self._transition(record_id, claimable, {'insw_status': 'SENT', 'sent_at': claimed_at}):
            return claimed_at
        return None

    async def mark_success(self, record_id, claimed_at, payload, response):
        return self._transition(record_id, self._held_by(claimed_at), {
            'insw_status': 'SUCCESS', 'insw_request_payload': payload, 'insw_response': response,
            'insw_error': None, 'error_kind': None, 'retry_count': 0,
        })

    async def mark_failed(self, record_id, claimed_at, payload, error, error_kind, response=None):
        record = self.records.get(record_id)
        retry_count = (record.retry_count or 0) + 1 if record else 1
        return self._transition(record_id, self._held_by(claimed_at), {
            'insw_status': 'FAILED', 'insw_request_payload': payload, 'insw_response': response,
            'insw_error': error, 'error_kind': error_kind, 'retry_count': retry_count,
        })

    async def load_source(self, company_code, transaction_type, transaction_id):
        return self.sources.get((company_code, transaction_type, transaction_id))

    async def get_company_name(self, company_code):
        return self.company_names.get(company_code)

    async def list_retryable(self, company_code, transaction_type, max_retries, stale_before=None):
        return [
            record.transaction_id for record in sorted(self.records.values(), key=lambda r: r.id)
            if record.company_code == company_code
            and record.transaction_type == transaction_type
            and record.retry_count < max_retries
            and ((record.insw_status == 'FAILED' and record.error_kind != 'validation')
                 or _is_stale(record, stale_before))
        ]

    async def list_logs(self, company_code, transaction_type=None, insw_status=None, limit=100):
        rows = [
            record for record in self.records.values()
            if record.company_code == company_code
            and (not transaction_type or record.transaction_type == transaction_type)
            and (not insw_status or record.insw_status == insw_status)
        ]
        rows.sort(key=lambda r: (r.updated_at, r.id), reverse=True)
        return rows[:limit]
