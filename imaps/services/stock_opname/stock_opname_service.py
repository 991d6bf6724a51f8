"""
Stock Opname Service
====================

Rekonsiliasi hasil hitung fisik terhadap posisi stok sistem.

Status: ACTIVE -> CONFIRMED | CANCELLED (keduanya terminal). Konfirmasi
menghasilkan adjustment GAIN/LOSS untuk setiap item dengan selisih.
Perbandingan selisih selalu memakai nilai Decimal penuh (tanpa pembulatan).
"""

import hashlib
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from ..base import BaseService, transactional, audit_log
from ..exceptions import ConflictError, NotFoundError, StateConflictError, ValidationError
from ..ledger.movement_ledger import MovementLedger, MovementTotals
from ...models import StockOpname, StockOpnameItem, Adjustment, AdjustmentItem
from ...schemas import (
    StockOpnameCreateSchema, StockOpnameItemInputSchema, StockOpnameSchema, AdjustmentSchema,
)

STATUS_ACTIVE = 'ACTIVE'
STATUS_CONFIRMED = 'CONFIRMED'
STATUS_CANCELLED = 'CANCELLED'
OPNAME_STATUSES = (STATUS_ACTIVE, STATUS_CONFIRMED, STATUS_CANCELLED)

ZERO = Decimal('0')


def classify_variance(variance: Decimal) -> Optional[str]:
    """GAIN kalau > 0, LOSS kalau < 0, None kalau tepat nol"""
    if variance > ZERO:
        return 'GAIN'
    if variance < ZERO:
        return 'LOSS'
    return None


def build_opname_line(line: Dict[str, Any], snapshot: MovementTotals) -> Dict[str, Any]:
    """Hitung system/variance/adjustment untuk satu baris hitung fisik"""
    beginning = snapshot.beginning
    incoming = snapshot.incoming
    outgoing = snapshot.outgoing
    physical = Decimal(line['physical_qty'])

    system_qty = beginning + incoming - outgoing
    variance = physical - system_qty

    return {
        'item_code': line['item_code'],
        'item_name': snapshot.item_name,
        'item_type': line['item_type'],
        'uom': line['uom'],
        'beginning_qty': beginning,
        'incoming_qty_on_date': incoming,
        'outgoing_qty_on_date': outgoing,
        'system_qty': system_qty,
        'physical_qty': physical,
        'variance_qty': variance,
        'adjustment_qty_signed': variance,
        'adjustment_type': classify_variance(variance),
        'notes': line.get('notes'),
    }


def opname_checksum(document_date: date, owner: Optional[int], items: List[Dict[str, Any]]) -> str:
    """Checksum payload untuk idempotensi create (urutan item tidak berpengaruh)"""
    canonical = {
        'document_date': document_date.isoformat(),
        'owner': owner,
        'items': sorted(
            [item['item_code'], item['item_type'], item['uom'],
             str(Decimal(item['physical_qty']).normalize()), item.get('notes') or '']
            for item in items
        ),
    }
    return hashlib.sha256(json.dumps(canonical, sort_keys=True).encode('utf-8')).hexdigest()


class StockOpnameService(BaseService):
    """CRITICAL SERVICE untuk Stock Opname"""

    model_class = StockOpname

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None,
                 company_service=None, item_type_service=None, transmission_queue=None):
        super().__init__(db_session, current_user, audit_service)
        self.company_service = company_service
        self.item_type_service = item_type_service
        self.transmission_queue = transmission_queue
        self.ledger = MovementLedger(db_session)

    # ==================== COMMANDS ====================

    async def create_opname(self, company_code: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Buat stock opname ACTIVE dengan snapshot ledger per document_date.

        Payload identik untuk opname ACTIVE yang sama mengembalikan opname tersebut
        tanpa menulis apa pun; wms_id yang sudah dipakai dengan payload berbeda
        menghasilkan ConflictError.
        """
        validated = StockOpnameCreateSchema.model_validate(data).model_dump()
        checksum = opname_checksum(validated['document_date'], validated['owner'], validated['items'])

        existing = await self._find(company_code, validated['wms_id'])
        if existing:
            if existing.status == STATUS_ACTIVE and existing.checksum == checksum:
                self.logger.info(f"Stock opname {existing.wms_id} resubmitted with identical payload")
                return self._serialize(existing)
            raise ConflictError(
                f"Stock opname with wms_id '{validated['wms_id']}' already exists ({existing.status})",
                'StockOpname', field='wms_id'
            )

        return await self._insert_opname(company_code, validated, checksum)

    @transactional
    @audit_log('CREATE', 'StockOpname')
    async def _insert_opname(self, company_code: int, validated: Dict[str, Any], checksum: str) -> Dict[str, Any]:
        items = validated['items']
        await self.company_service.ensure_active(company_code)
        await self.item_type_service.ensure_known(item['item_type'] for item in items)

        opname = StockOpname(
            wms_id=validated['wms_id'],
            company_code=company_code,
            owner=validated['owner'],
            document_date=validated['document_date'],
            status=STATUS_ACTIVE,
            notes=validated['notes'],
            checksum=checksum,
            created_by=self.current_user,
        )
        opname.items = await self._build_items(company_code, validated['document_date'], items)
        self.db_session.add(opname)
        await self.db_session.flush()

        self.logger.info(f"Stock opname {opname.wms_id} created for company {company_code} "
                         f"({len(opname.items)} items)")
        return self._serialize(opname)

    @transactional
    @audit_log('UPDATE_ITEMS', 'StockOpname')
    async def update_items(self, company_code: int, wms_id: str,
                           items: List[Dict[str, Any]], notes: str = None) -> Dict[str, Any]:
        """Ganti seluruh item opname ACTIVE dan hitung ulang snapshot"""
        opname = await self._get_active(company_code, wms_id)
        await self._update_if_active(opname, {})
        await self._replace_items(opname, items, notes)
        await self.db_session.flush()
        return self._serialize(opname)

    @transactional
    @audit_log('CONFIRM', 'StockOpname')
    async def confirm_opname(self, company_code: int, wms_id: str,
                             items: List[Dict[str, Any]] = None, notes: str = None) -> Dict[str, Any]:
        """
        ACTIVE -> CONFIRMED lalu buat adjustment untuk setiap item dengan selisih.
        Opname yang bukan ACTIVE ditolak dengan StateConflictError tanpa efek samping.
        """
        opname = await self._get_active(company_code, wms_id)
        if items is not None:
            await self._update_if_active(opname, {})
            await self._replace_items(opname, items, notes)
            await self.db_session.flush()
        elif notes is not None:
            opname.notes = notes
            await self.db_session.flush()

        confirmed_at = datetime.utcnow()
        await self._transition(opname, STATUS_CONFIRMED, {'confirmed_at': confirmed_at})

        adjustment = await self._create_adjustment(opname)

        if adjustment is not None:
            await self.transmission_queue.queue(company_code, 'adjustment', adjustment.id, adjustment.wms_id)
            await self.transmission_queue.queue(company_code, 'stock_opname', opname.id, opname.wms_id)

        self.logger.info(f"Stock opname {wms_id} confirmed; "
                         f"{len(adjustment.items) if adjustment else 0} adjustment lines generated")

        result = self._serialize(opname)
        result['adjustment'] = AdjustmentSchema.model_validate(adjustment).model_dump() if adjustment else None
        return result

    @transactional
    @audit_log('CANCEL', 'StockOpname')
    async def cancel_opname(self, company_code: int, wms_id: str, notes: str = None) -> Dict[str, Any]:
        """ACTIVE -> CANCELLED; tidak ada adjustment"""
        opname = await self._get_active(company_code, wms_id)
        values = {'cancelled_at': datetime.utcnow()}
        if notes is not None:
            values['notes'] = notes
        await self._transition(opname, STATUS_CANCELLED, values)

        self.logger.info(f"Stock opname {wms_id} cancelled")
        return self._serialize(opname)

    # ==================== QUERIES ====================

    async def get_opname(self, company_code: int, wms_id: str) -> Dict[str, Any]:
        opname = await self._find(company_code, wms_id)
        if not opname:
            raise NotFoundError('StockOpname', wms_id)
        return self._serialize(opname)

    async def list_opnames(self, company_code: int, status: str = None, start_date: date = None,
                           end_date: date = None, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        if status and status not in OPNAME_STATUSES:
            raise ValidationError(f"Invalid status '{status}'", field='status')

        query = select(StockOpname).where(StockOpname.company_code == company_code)
        if status:
            query = query.where(StockOpname.status == status)
        if start_date:
            query = query.where(StockOpname.document_date >= start_date)
        if end_date:
            query = query.where(StockOpname.document_date <= end_date)
        query = query.order_by(StockOpname.document_date.desc(), StockOpname.id.desc())

        result = await self._paginate_query(query, page, per_page)
        return {
            'items': [self._serialize(row) for row in result['items']],
            'pagination': result['pagination']
        }

    # ==================== INTERNALS ====================

    async def _find(self, company_code: int, wms_id: str) -> Optional[StockOpname]:
        result = await self.db_session.execute(
            select(StockOpname)
            .where(StockOpname.company_code == company_code, StockOpname.wms_id == wms_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def _get_active(self, company_code: int, wms_id: str) -> StockOpname:
        opname = await self._find(company_code, wms_id)
        if not opname:
            raise NotFoundError('StockOpname', wms_id)
        if opname.status != STATUS_ACTIVE:
            raise StateConflictError(
                f"Stock opname {wms_id} is {opname.status}; only ACTIVE opname can be changed",
                current_status=opname.status
            )
        return opname

    async def _update_if_active(self, opname: StockOpname, values: Dict[str, Any]) -> None:
        """Conditional UPDATE ... WHERE status='ACTIVE'; row terkunci sampai commit"""
        now = datetime.utcnow()
        result = await self.db_session.execute(
            update(StockOpname)
            .where(StockOpname.id == opname.id, StockOpname.status == STATUS_ACTIVE)
            .values(updated_at=now, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StateConflictError(
                f"Stock opname {opname.wms_id} is no longer ACTIVE",
                current_status=None
            )

        set_committed_value(opname, 'updated_at', now)
        for key, value in values.items():
            set_committed_value(opname, key, value)

    async def _transition(self, opname: StockOpname, new_status: str, values: Dict[str, Any]) -> None:
        """Compare-and-swap status ACTIVE -> new_status"""
        await self._update_if_active(opname, dict(values, status=new_status))

    async def _build_items(self, company_code: int, document_date: date,
                           items: List[Dict[str, Any]]) -> List[StockOpnameItem]:
        snapshot = await self.ledger.snapshot_as_of(company_code, document_date,
                                                    {item['item_code'] for item in items})
        lines = []
        for item in items:
            key = (item['item_code'], item['item_type'], item['uom'])
            line = build_opname_line(item, snapshot.get(key, MovementTotals()))
            lines.append(StockOpnameItem(company_code=company_code, **line))
        return lines

    async def _replace_items(self, opname: StockOpname, items: List[Dict[str, Any]],
                             notes: Optional[str]) -> None:
        if not items:
            raise ValidationError("At least one item is required", field='items')

        validated = [StockOpnameItemInputSchema.model_validate(item).model_dump() for item in items]
        keys = [(item['item_code'], item['item_type'], item['uom']) for item in validated]
        if len(keys) != len(set(keys)):
            raise ValidationError("Duplicate item lines in stock opname", field='items')

        await self.item_type_service.ensure_known(item['item_type'] for item in validated)

        opname.items = await self._build_items(opname.company_code, opname.document_date, validated)
        opname.checksum = opname_checksum(opname.document_date, opname.owner, validated)
        if notes is not None:
            opname.notes = notes

    async def _create_adjustment(self, opname: StockOpname) -> Optional[Adjustment]:
        """Satu header adjustment + satu baris per item dengan selisih != 0"""
        lines = [item for item in opname.items if item.adjustment_type is not None]
        if not lines:
            return None

        adjustment = Adjustment(
            wms_id=opname.wms_id,
            company_code=opname.company_code,
            wms_doc_type='STOCK_OPNAME',
            internal_evidence_number=f"SO-ADJ/{opname.wms_id}",
            transaction_date=opname.document_date,
            source_stock_opname_id=opname.id,
        )
        adjustment.items = [
            AdjustmentItem(
                adjustment_type=item.adjustment_type,
                item_type=item.item_type,
                item_code=item.item_code,
                item_name=item.item_name or '',
                uom=item.uom,
                qty=abs(item.variance_qty),
                reason=f"Stock opname {opname.wms_id}",
            )
            for item in lines
        ]
        self.db_session.add(adjustment)
        await self.db_session.flush()
        return adjustment

    def _serialize(self, opname: StockOpname) -> Dict[str, Any]:
        return StockOpnameSchema.model_validate(opname).model_dump()
