"""
Business partner master data: Customer dan Supplier.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ..base import CRUDService
from ...models import Customer, Supplier
from ...schemas.master import (
    CustomerCreateSchema, CustomerUpdateSchema, CustomerSchema,
    SupplierCreateSchema, SupplierUpdateSchema, SupplierSchema,
)


class CustomerService(CRUDService):
    model_class = Customer
    create_schema = CustomerCreateSchema
    update_schema = CustomerUpdateSchema
    response_schema = CustomerSchema
    search_fields = ('code', 'name', 'address')

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session=db_session, current_user=current_user,
                         audit_service=audit_service)


class SupplierService(CRUDService):
    model_class = Supplier
    create_schema = SupplierCreateSchema
    update_schema = SupplierUpdateSchema
    response_schema = SupplierSchema
    search_fields = ('code', 'name', 'address')

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session=db_session, current_user=current_user,
                         audit_service=audit_service)
