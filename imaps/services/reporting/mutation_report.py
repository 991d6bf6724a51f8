"""
Mutation Report Service
=======================

Laporan mutasi barang per (item_code, item_type, uom) untuk satu periode:
beginning, incoming, outgoing, adjustment dan ending.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..base import BaseService
from ..exceptions import ValidationError
from ..ledger.movement_ledger import MovementLedger, MovementTotals, ZERO
from ...schemas import MutationReportSchema


class MutationReportService(BaseService):
    """Service untuk laporan mutasi"""

    def __init__(self, db_session: AsyncSession, current_user: str = None,
                 audit_service=None, item_type_service=None):
        super().__init__(db_session, current_user, audit_service)
        self.item_type_service = item_type_service
        self.ledger = MovementLedger(db_session)

    async def generate(self, company_code: int, start_date: date, end_date: date,
                       item_type: str = None, item_code: str = None) -> Dict[str, Any]:
        """
        beginning = saldo awal (balance_date <= end_date) + net mutasi sebelum start_date
        incoming/outgoing/adjustment = total dalam periode (inklusif)
        ending = beginning + incoming - outgoing + adjustment
        """
        if start_date > end_date:
            raise ValidationError("start_date must be before or equal to end_date", field='start_date')
        if item_type:
            await self.item_type_service.ensure_known([item_type])

        item_codes = [item_code] if item_code else None

        balances = await self.ledger.beginning_balances(company_code, end_date, item_codes, item_type)
        before = await self.ledger.movements(company_code, None, start_date - timedelta(days=1),
                                             item_codes, item_type)
        period = await self.ledger.movements(company_code, start_date, end_date, item_codes, item_type)

        rows = []
        for key in sorted(set(balances) | set(before) | set(period)):
            balance_qty, balance_name = balances.get(key, (ZERO, None))
            prior = before.get(key, MovementTotals())
            moved = period.get(key, MovementTotals())

            beginning = balance_qty + prior.net
            ending = beginning + moved.net
            item_code_, item_type_, uom = key
            rows.append({
                'item_code': item_code_,
                'item_name': moved.item_name or prior.item_name or balance_name,
                'item_type': item_type_,
                'uom': uom,
                'beginning': beginning,
                'incoming': moved.incoming,
                'outgoing': moved.outgoing,
                'adjustment': moved.adjustment,
                'ending': ending,
            })

        self.logger.info(f"Mutation report company={company_code} {start_date}..{end_date}: {len(rows)} rows")

        return MutationReportSchema(
            company_code=company_code,
            start_date=start_date,
            end_date=end_date,
            item_type=item_type,
            generated_at=datetime.utcnow(),
            rows=rows,
        ).model_dump()
