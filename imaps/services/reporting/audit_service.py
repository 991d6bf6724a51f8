"""
Audit Service
=============

Service untuk audit logging dan compliance tracking
"""

from typing import Dict, Any, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from ..base import BaseService
from ...models import AuditLog

class AuditService(BaseService):
    """Service untuk Audit Trail"""

    def __init__(self, db_session: AsyncSession, current_user: str = None):
        super().__init__(db_session, current_user)

    async def log_action(self, entity_type: str, entity_id: Optional[int],
                         action: str, request_id: str = None,
                         old_values: Dict[str, Any] = None,
                         new_values: Dict[str, Any] = None,
                         user_id: int = None, username: str = None,
                         notes: str = None, severity: str = "INFO") -> int:
        """Catat audit action; commit mengikuti transaksi pemanggil"""
        audit_log = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id if entity_id is not None else -1,
            action=action,
            user_id=user_id,
            username=username or self.current_user,
            timestamp=datetime.utcnow(),
            request_id=request_id,
            old_values=old_values or None,
            new_values=new_values or None,
            notes=notes,
            severity=severity
        )

        self.db_session.add(audit_log)
        await self.db_session.flush()

        return audit_log.id

    async def get_audit_trail(self, entity_type: str = None, entity_id: int = None,
                              start_date: datetime = None, end_date: datetime = None,
                              page: int = 1, per_page: int = 50) -> Dict[str, Any]:
        """Get audit trail with filters"""
        query = select(AuditLog)

        if entity_type:
            query = query.where(AuditLog.entity_type == entity_type)
        if entity_id:
            query = query.where(AuditLog.entity_id == entity_id)
        if start_date:
            query = query.where(AuditLog.timestamp >= start_date)
        if end_date:
            query = query.where(AuditLog.timestamp <= end_date)

        query = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())

        result = await self._paginate_query(query, page, per_page)

        audit_logs = []
        for log in result['items']:
            audit_logs.append({
                **log.to_dict(),
                'request_id': log.request_id,
                'severity': log.severity,
                'old_values': log.old_values,
                'new_values': log.new_values,
            })

        return {
            'audit_logs': audit_logs,
            'pagination': result['pagination']
        }
