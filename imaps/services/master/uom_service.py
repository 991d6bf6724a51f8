from sqlalchemy.ext.asyncio import AsyncSession

from ..base import CRUDService
from ...models import UOM
from ...schemas.master import UOMCreateSchema, UOMUpdateSchema, UOMSchema


class UOMService(CRUDService):
    """
    Service for managing Units of Measure (master data).
    """
    model_class = UOM
    create_schema = UOMCreateSchema
    update_schema = UOMUpdateSchema
    response_schema = UOMSchema

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session=db_session, current_user=current_user,
                         audit_service=audit_service)
