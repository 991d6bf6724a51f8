from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import CRUDService
from ..exceptions import NotFoundError, BusinessRuleError
from ...models import Company
from ...schemas.master import CompanyCreateSchema, CompanyUpdateSchema, CompanySchema


class CompanyService(CRUDService):
    """
    Service untuk master Company.
    Delete = soft deactivate (status INACTIVE); company_code dipakai di semua transaksi.
    """
    model_class = Company
    create_schema = CompanyCreateSchema
    update_schema = CompanyUpdateSchema
    response_schema = CompanySchema

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session=db_session, current_user=current_user,
                         audit_service=audit_service)

    async def get_by_code(self, company_code: int) -> Company:
        result = await self.db_session.execute(
            select(Company).filter(Company.code == company_code)
        )
        company = result.scalars().first()
        if not company:
            raise NotFoundError('Company', company_code)
        return company

    async def ensure_active(self, company_code: int) -> Company:
        """Company harus ada dan ACTIVE sebelum transaksi dicatat"""
        company = await self.get_by_code(company_code)
        if company.status != 'ACTIVE':
            raise BusinessRuleError(f"Company {company_code} is not active", 'COMPANY_INACTIVE')
        return company
