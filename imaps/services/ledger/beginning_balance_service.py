"""
Beginning Balance Service
=========================

Saldo awal per item; setiap baris diantrikan sebagai transaksi saldo_awal INSW.
"""

from datetime import date
from typing import Dict, Any, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import BaseService, transactional, audit_log
from ..exceptions import ConflictError, ValidationError
from ...models import BeginningBalance
from ...schemas import BeginningBalanceCreateSchema, BeginningBalanceSchema


class BeginningBalanceService(BaseService):
    """Service untuk saldo awal"""

    model_class = BeginningBalance

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None,
                 company_service=None, item_type_service=None, transmission_queue=None):
        super().__init__(db_session, current_user, audit_service)
        self.company_service = company_service
        self.item_type_service = item_type_service
        self.transmission_queue = transmission_queue

    @transactional
    @audit_log('CREATE')
    async def create_many(self, company_code: int, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Simpan beberapa saldo awal sekaligus (all-or-nothing)"""
        if not rows:
            raise ValidationError("At least one beginning balance is required", field='items')

        validated = [BeginningBalanceCreateSchema.model_validate(row).model_dump() for row in rows]

        await self.company_service.ensure_active(company_code)
        await self.item_type_service.ensure_known(row['item_type'] for row in validated)

        seen = set()
        for row in validated:
            key = (row['item_code'], row['item_type'], row['uom'], row['balance_date'])
            if key in seen or await self._exists(company_code, *key):
                raise ConflictError(
                    f"Beginning balance for {row['item_code']} ({row['item_type']}, {row['uom']}) "
                    f"on {row['balance_date'].isoformat()} already exists",
                    'BeginningBalance', field='item_code'
                )
            seen.add(key)

        balances = [BeginningBalance(company_code=company_code, **row) for row in validated]
        self.db_session.add_all(balances)
        await self.db_session.flush()

        for balance in balances:
            await self.transmission_queue.queue(company_code, 'saldo_awal', balance.id,
                                                f"SAL-{balance.item_code}")

        self.logger.info(f"{len(balances)} beginning balances recorded for company {company_code}")
        return {
            'id': balances[0].id,
            'items': [BeginningBalanceSchema.model_validate(b).model_dump() for b in balances],
        }

    async def list(self, company_code: int, start_date: date = None, end_date: date = None,
                   item_type: str = None, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        query = select(BeginningBalance).where(BeginningBalance.company_code == company_code)
        if start_date:
            query = query.where(BeginningBalance.balance_date >= start_date)
        if end_date:
            query = query.where(BeginningBalance.balance_date <= end_date)
        if item_type:
            query = query.where(BeginningBalance.item_type == item_type)
        query = query.order_by(BeginningBalance.balance_date.desc(), BeginningBalance.item_code.asc())

        result = await self._paginate_query(query, page, per_page)
        return {
            'items': [BeginningBalanceSchema.model_validate(row).model_dump() for row in result['items']],
            'pagination': result['pagination']
        }

    async def _exists(self, company_code, item_code, item_type, uom, balance_date) -> bool:
        result = await self.db_session.execute(
            select(BeginningBalance.id).where(
                BeginningBalance.company_code == company_code,
                BeginningBalance.item_code == item_code,
                BeginningBalance.item_type == item_type,
                BeginningBalance.uom == uom,
                BeginningBalance.balance_date == balance_date,
            )
        )
        return result.scalars().first() is not None
