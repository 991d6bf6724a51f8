"""
Movement Ledger
===============

Agregasi pergerakan stok per (item_code, item_type, uom) dari saldo awal,
pemasukan, pengeluaran dan adjustment. Dipakai stock opname dan laporan mutasi.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import (
    BeginningBalance, IncomingGood, IncomingGoodItem, OutgoingGood, OutgoingGoodItem,
    Adjustment, AdjustmentItem,
)

ItemKey = Tuple[str, str, str]  # (item_code, item_type, uom)

ZERO = Decimal('0')


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class MovementTotals:
    """Total pergerakan satu item dalam satu rentang tanggal"""
    beginning: Decimal = ZERO
    incoming: Decimal = ZERO
    outgoing: Decimal = ZERO
    gain: Decimal = ZERO
    loss: Decimal = ZERO
    item_name: Optional[str] = field(default=None)

    @property
    def adjustment(self) -> Decimal:
        return self.gain - self.loss

    @property
    def net(self) -> Decimal:
        return self.incoming - self.outgoing + self.adjustment


class MovementLedger:
    """Query helper; tidak melakukan commit"""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def beginning_balances(self, company_code: int, as_of: date,
                                 item_codes: Iterable[str] = None,
                                 item_type: str = None) -> Dict[ItemKey, Tuple[Decimal, Optional[str]]]:
        """Saldo awal dengan balance_date <= as_of"""
        query = (
            select(BeginningBalance.item_code, BeginningBalance.item_type, BeginningBalance.uom,
                   func.sum(BeginningBalance.qty), func.max(BeginningBalance.item_name))
            .where(BeginningBalance.company_code == company_code,
                   BeginningBalance.balance_date <= as_of)
            .group_by(BeginningBalance.item_code, BeginningBalance.item_type, BeginningBalance.uom)
        )
        query = self._filter_items(query, BeginningBalance, item_codes, item_type)

        result = await self.db_session.execute(query)
        return {(code, itype, uom): (to_decimal(qty), name)
                for code, itype, uom, qty, name in result.all()}

    async def movements(self, company_code: int, start: date = None, end: date = None,
                        item_codes: Iterable[str] = None,
                        item_type: str = None) -> Dict[ItemKey, MovementTotals]:
        """
        Total pemasukan, pengeluaran, GAIN dan LOSS per item untuk start <= tanggal <= end.
        Batas yang None berarti tidak dibatasi.
        """
        totals: Dict[ItemKey, MovementTotals] = defaultdict(MovementTotals)

        incoming = await self._sum_goods(IncomingGood, IncomingGoodItem, IncomingGood.incoming_date,
                                         IncomingGoodItem.incoming_good_id, company_code,
                                         start, end, item_codes, item_type)
        for key, (qty, name) in incoming.items():
            totals[key].incoming += qty
            totals[key].item_name = totals[key].item_name or name

        outgoing = await self._sum_goods(OutgoingGood, OutgoingGoodItem, OutgoingGood.outgoing_date,
                                         OutgoingGoodItem.outgoing_good_id, company_code,
                                         start, end, item_codes, item_type)
        for key, (qty, name) in outgoing.items():
            totals[key].outgoing += qty
            totals[key].item_name = totals[key].item_name or name

        query = (
            select(AdjustmentItem.item_code, AdjustmentItem.item_type, AdjustmentItem.uom,
                   AdjustmentItem.adjustment_type, func.sum(AdjustmentItem.qty),
                   func.max(AdjustmentItem.item_name))
            .join(Adjustment, Adjustment.id == AdjustmentItem.adjustment_id)
            .where(Adjustment.company_code == company_code)
            .group_by(AdjustmentItem.item_code, AdjustmentItem.item_type, AdjustmentItem.uom,
                      AdjustmentItem.adjustment_type)
        )
        query = self._filter_dates(query, Adjustment.transaction_date, start, end)
        query = self._filter_items(query, AdjustmentItem, item_codes, item_type)

        result = await self.db_session.execute(query)
        for code, itype, uom, adjustment_type, qty, name in result.all():
            key = (code, itype, uom)
            if adjustment_type == 'GAIN':
                totals[key].gain += to_decimal(qty)
            elif adjustment_type == 'LOSS':
                totals[key].loss += to_decimal(qty)
            totals[key].item_name = totals[key].item_name or name or None

        return dict(totals)

    async def snapshot_as_of(self, company_code: int, as_of: date,
                             item_codes: Iterable[str] = None) -> Dict[ItemKey, MovementTotals]:
        """
        Posisi stok per tanggal: beginning = saldo awal <= as_of,
        incoming = pemasukan + GAIN <= as_of, outgoing = pengeluaran + LOSS <= as_of.
        """
        codes = list(item_codes) if item_codes is not None else None
        balances = await self.beginning_balances(company_code, as_of, codes)
        movements = await self.movements(company_code, None, as_of, codes)

        snapshot: Dict[ItemKey, MovementTotals] = {}
        for key in set(balances) | set(movements):
            beginning, balance_name = balances.get(key, (ZERO, None))
            moved = movements.get(key, MovementTotals())
            snapshot[key] = MovementTotals(
                beginning=beginning,
                incoming=moved.incoming + moved.gain,
                outgoing=moved.outgoing + moved.loss,
                item_name=moved.item_name or balance_name,
            )
        return snapshot

    # ==================== QUERY HELPERS ====================

    async def _sum_goods(self, header_model, item_model, date_column, fk_column, company_code,
                         start, end, item_codes, item_type) -> Dict[ItemKey, Tuple[Decimal, Optional[str]]]:
        query = (
            select(item_model.item_code, item_model.item_type, item_model.uom,
                   func.sum(item_model.qty), func.max(item_model.item_name))
            .join(header_model, header_model.id == fk_column)
            .where(header_model.company_code == company_code)
            .group_by(item_model.item_code, item_model.item_type, item_model.uom)
        )
        query = self._filter_dates(query, date_column, start, end)
        query = self._filter_items(query, item_model, item_codes, item_type)

        result = await self.db_session.execute(query)
        return {(code, itype, uom): (to_decimal(qty), name)
                for code, itype, uom, qty, name in result.all()}

    @staticmethod
    def _filter_dates(query, date_column, start, end):
        if start is not None:
            query = query.where(date_column >= start)
        if end is not None:
            query = query.where(date_column <= end)
        return query

    @staticmethod
    def _filter_items(query, model, item_codes, item_type):
        if item_codes is not None:
            query = query.where(model.item_code.in_(list(item_codes)))
        if item_type:
            query = query.where(model.item_type == item_type)
        return query
