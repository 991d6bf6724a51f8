"""
Goods Ledger Services
=====================

Ingest pemasukan, pengeluaran dan adjustment barang dari WMS. Setiap transaksi
yang berhasil disimpan langsung diantrikan (PENDING) untuk pelaporan INSW.
"""

from datetime import date
from typing import Dict, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import BaseService, transactional, audit_log
from ..exceptions import ConflictError, ValidationError, NotFoundError
from ...models import (
    IncomingGood, IncomingGoodItem, OutgoingGood, OutgoingGoodItem, Adjustment, AdjustmentItem,
)
from ...schemas import (
    IncomingGoodCreateSchema, IncomingGoodSchema, OutgoingGoodCreateSchema, OutgoingGoodSchema,
    AdjustmentCreateSchema, AdjustmentSchema,
)


class GoodsLedgerService(BaseService):
    """Base untuk ingest header + items; subclass menentukan model dan tanggal transaksi"""

    header_model = None
    item_model = None
    create_schema = None
    response_schema = None
    date_field: str = None
    transaction_type: str = None

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None,
                 company_service=None, item_type_service=None, transmission_queue=None):
        super().__init__(db_session, current_user, audit_service)
        self.company_service = company_service
        self.item_type_service = item_type_service
        self.transmission_queue = transmission_queue

    @property
    def model_class(self):
        return self.header_model

    @transactional
    @audit_log('CREATE')
    async def create(self, company_code: int, data: Dict[str, Any]) -> Dict[str, Any]:
        validated = self.create_schema.model_validate(data).model_dump()
        items = validated.pop('items')

        await self.company_service.ensure_active(company_code)
        await self.item_type_service.ensure_known(item['item_type'] for item in items)
        await self._ensure_unique_wms_id(company_code, validated['wms_id'])

        header = self.header_model(company_code=company_code, **validated)
        header.items = [self.item_model(**item) for item in items]
        self.db_session.add(header)
        await self.db_session.flush()

        await self.transmission_queue.queue(company_code, self.transaction_type, header.id, header.wms_id)

        self.logger.info(f"{self.transaction_type} {header.wms_id} recorded for company {company_code} "
                         f"({len(items)} items)")
        return self.response_schema.model_validate(header).model_dump()

    async def get(self, company_code: int, entity_id: int) -> Dict[str, Any]:
        result = await self.db_session.execute(
            select(self.header_model).where(self.header_model.id == entity_id,
                                            self.header_model.company_code == company_code)
        )
        header = result.scalars().first()
        if not header:
            raise NotFoundError(self.header_model.__name__, entity_id)
        return self.response_schema.model_validate(header).model_dump()

    async def list(self, company_code: int, start_date: date = None, end_date: date = None,
                   page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must be before or equal to end_date", field='start_date')

        date_column = getattr(self.header_model, self.date_field)
        query = select(self.header_model).where(self.header_model.company_code == company_code)
        if start_date:
            query = query.where(date_column >= start_date)
        if end_date:
            query = query.where(date_column <= end_date)
        query = query.order_by(date_column.desc(), self.header_model.id.desc())

        result = await self._paginate_query(query, page, per_page)
        return {
            'items': [self.response_schema.model_validate(row).model_dump() for row in result['items']],
            'pagination': result['pagination']
        }

    async def _ensure_unique_wms_id(self, company_code: int, wms_id: str) -> None:
        result = await self.db_session.execute(
            select(self.header_model.id).where(self.header_model.company_code == company_code,
                                               self.header_model.wms_id == wms_id)
        )
        if result.scalars().first():
            raise ConflictError(f"{self.header_model.__name__} with wms_id '{wms_id}' already exists",
                                self.header_model.__name__, field='wms_id')


class IncomingGoodService(GoodsLedgerService):
    """Service untuk pemasukan barang"""
    header_model = IncomingGood
    item_model = IncomingGoodItem
    create_schema = IncomingGoodCreateSchema
    response_schema = IncomingGoodSchema
    date_field = 'incoming_date'
    transaction_type = 'incoming'


class OutgoingGoodService(GoodsLedgerService):
    """Service untuk pengeluaran barang"""
    header_model = OutgoingGood
    item_model = OutgoingGoodItem
    create_schema = OutgoingGoodCreateSchema
    response_schema = OutgoingGoodSchema
    date_field = 'outgoing_date'
    transaction_type = 'outgoing'


class AdjustmentService(GoodsLedgerService):
    """Adjustment GAIN/LOSS dari WMS (kerusakan, temuan, koreksi)"""
    header_model = Adjustment
    item_model = AdjustmentItem
    create_schema = AdjustmentCreateSchema
    response_schema = AdjustmentSchema
    date_field = 'transaction_date'
    transaction_type = 'adjustment'
