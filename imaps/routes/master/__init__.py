"""
Master Data Routes
==================

Routes untuk companies, currencies, customers, suppliers, uoms dan item types
"""

from fastapi import APIRouter

from ...schemas import (
    CompanyCreateSchema, CompanyUpdateSchema, CurrencyCreateSchema, CurrencyUpdateSchema,
    CustomerCreateSchema, CustomerUpdateSchema, SupplierCreateSchema, SupplierUpdateSchema,
    UOMCreateSchema, UOMUpdateSchema,
)
from .crud_routes import build_crud_router
from .item_type_routes import item_type_router

master_router = APIRouter()
master_router.include_router(
    build_crud_router('company', 'Company', CompanyCreateSchema, CompanyUpdateSchema),
    prefix="/companies"
)
master_router.include_router(
    build_crud_router('currency', 'Currency', CurrencyCreateSchema, CurrencyUpdateSchema),
    prefix="/currencies"
)
master_router.include_router(
    build_crud_router('customer', 'Customer', CustomerCreateSchema, CustomerUpdateSchema),
    prefix="/customers"
)
master_router.include_router(
    build_crud_router('supplier', 'Supplier', SupplierCreateSchema, SupplierUpdateSchema),
    prefix="/suppliers"
)
master_router.include_router(
    build_crud_router('uom', 'UOM', UOMCreateSchema, UOMUpdateSchema),
    prefix="/uoms"
)
master_router.include_router(item_type_router, prefix="/item-types")

__all__ = ['master_router']
