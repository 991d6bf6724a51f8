from sqlalchemy.ext.asyncio import AsyncSession

from ..base import CRUDService
from ...models import Currency
from ...schemas.master import CurrencyCreateSchema, CurrencyUpdateSchema, CurrencySchema


class CurrencyService(CRUDService):
    """
    Service for managing Currencies (master data).
    """
    model_class = Currency
    create_schema = CurrencyCreateSchema
    update_schema = CurrencyUpdateSchema
    response_schema = CurrencySchema

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session=db_session, current_user=current_user,
                         audit_service=audit_service)
