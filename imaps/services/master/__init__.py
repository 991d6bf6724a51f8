"""
Master Data Services
====================

Services untuk Company, Currency, Customer, Supplier, UOM dan ItemType
"""

from .company_service import CompanyService
from .currency_service import CurrencyService
from .partner_service import CustomerService, SupplierService
from .uom_service import UOMService
from .item_type_service import ItemTypeService, DEFAULT_ITEM_TYPES

__all__ = [
    'CompanyService',
    'CurrencyService',
    'CustomerService',
    'SupplierService',
    'UOMService',
    'ItemTypeService',
    'DEFAULT_ITEM_TYPES',
]
