"""
Item Type Service
=================

Read-only access ke jenis barang, plus seed data default.
"""

from typing import Dict, Any, Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import BaseService, transactional
from ..exceptions import ValidationError
from ...models import ItemType
from ...schemas.master import ItemTypeSchema

DEFAULT_ITEM_TYPES = [
    # (code, name_en, name_id, category)
    ('ROH', 'Raw Material', 'Bahan Baku', 'RAW_MATERIAL'),
    ('HALB', 'Semi-Finished Goods', 'Barang Setengah Jadi', 'SEMI_FINISHED'),
    ('HIBE', 'Operating Supplies', 'Bahan Penolong', 'SUPPLIES'),
    ('FERT', 'Finished Goods', 'Barang Jadi', 'FINISHED_GOODS'),
    ('HIBE-M', 'Machinery', 'Mesin', 'CAPITAL_GOODS'),
    ('HIBE-E', 'Engineering Equipment', 'Peralatan Teknik', 'CAPITAL_GOODS'),
    ('HIBE-T', 'Tools', 'Peralatan', 'CAPITAL_GOODS'),
    ('SCRAP', 'Scrap / Waste', 'Sisa / Scrap', 'SCRAP'),
    ('WIP', 'Work in Process', 'Barang Dalam Proses', 'WORK_IN_PROCESS'),
]


class ItemTypeService(BaseService):
    """Service untuk ItemType"""

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session, current_user, audit_service)

    async def list(self, include_inactive: bool = False) -> List[Dict[str, Any]]:
        query = select(ItemType)
        if not include_inactive:
            query = query.where(ItemType.is_active.is_(True))
        query = query.order_by(ItemType.sort_order.asc(), ItemType.item_type_code.asc())

        result = await self.db_session.execute(query)
        return [ItemTypeSchema.model_validate(row).model_dump() for row in result.scalars().all()]

    async def ensure_known(self, codes: Iterable[str]) -> None:
        """Raise ValidationError kalau ada item type yang tidak terdaftar / non-aktif"""
        requested = set(codes)
        if not requested:
            return

        result = await self.db_session.execute(
            select(ItemType.item_type_code).where(
                ItemType.item_type_code.in_(requested),
                ItemType.is_active.is_(True)
            )
        )
        missing = sorted(requested - set(result.scalars().all()))
        if missing:
            raise ValidationError(
                f"Item types not found: {', '.join(missing)}",
                field='item_type',
                errors=[{'field': 'item_type', 'code': 'UNKNOWN_ITEM_TYPE',
                         'message': f"Item type '{code}' is not registered"} for code in missing]
            )

    @transactional
    async def seed_defaults(self) -> int:
        """Insert item type default yang belum ada; return jumlah yang ditambahkan"""
        result = await self.db_session.execute(select(ItemType.item_type_code))
        existing = set(result.scalars().all())

        added = 0
        for order, (code, name_en, name_id, category) in enumerate(DEFAULT_ITEM_TYPES, start=1):
            if code in existing:
                continue
            self.db_session.add(ItemType(
                item_type_code=code, name_en=name_en, name_id=name_id,
                category=category, is_active=True, sort_order=order
            ))
            added += 1

        self.logger.info(f"Seeded {added} item types")
        return added
