"""
iMAPS Services Module
=====================

Complete services layer untuk iMAPS application
Menggunakan dependency injection pattern untuk service management
"""

from .base import BaseService, CRUDService, transactional, audit_log
from .exceptions import *

# Master Data Domain
from .master import (
    CompanyService, CurrencyService, CustomerService, SupplierService, UOMService, ItemTypeService
)

# Ledger Domain
from .ledger import (
    IncomingGoodService, OutgoingGoodService, AdjustmentService, BeginningBalanceService
)

# Stock Opname Domain
from .stock_opname import StockOpnameService

# Auth Domain
from .auth import (
    AuthService, UserService
)

# Integration Domain
from .integration import (
    INSWClient, SqlAlchemyTransmissionRepository, TransmissionService
)

# Reporting Domain
from .reporting import (
    MutationReportService, AuditService
)

__all__ = [
    # Base Classes
    'BaseService', 'CRUDService', 'transactional', 'audit_log',

    # Master Data Domain
    'CompanyService', 'CurrencyService', 'CustomerService', 'SupplierService',
    'UOMService', 'ItemTypeService',

    # Ledger Domain
    'IncomingGoodService', 'OutgoingGoodService', 'AdjustmentService', 'BeginningBalanceService',

    # Stock Opname Domain
    'StockOpnameService',

    # Auth Domain
    'AuthService', 'UserService',

    # Integration Domain
    'INSWClient', 'SqlAlchemyTransmissionRepository', 'TransmissionService',

    # Reporting Domain
    'MutationReportService', 'AuditService',

    'ServiceRegistry', 'create_service_registry',
]


class ServiceRegistry:
    """
    Service Registry untuk dependency injection
    Mengelola lifecycle dan dependencies antar services
    """

    def __init__(self, db_session, config: dict, current_user: str = None, insw_client=None):
        self.db_session = db_session
        self.config = config
        self.current_user = current_user
        self.insw_client = insw_client
        self._services = {}

        # Initialize core services first
        self._init_core_services()

        # Initialize domain services
        self._init_domain_services()

    def _init_core_services(self):
        """Initialize core services yang diperlukan services lain"""

        # Audit Service (needed by almost all services)
        self._services['audit'] = AuditService(
            db_session=self.db_session,
            current_user=self.current_user
        )

        # Master data yang dipakai validasi ledger dan opname
        self._services['company'] = CompanyService(
            db_session=self.db_session,
            current_user=self.current_user,
            audit_service=self._services['audit']
        )

        self._services['item_type'] = ItemTypeService(
            db_session=self.db_session,
            current_user=self.current_user,
            audit_service=self._services['audit']
        )

        # Tracking log INSW; ledger services mengantrikan transaksi lewat repository ini
        self._services['transmission_repository'] = SqlAlchemyTransmissionRepository(self.db_session)

    def _init_domain_services(self):
        """Initialize domain services dengan dependencies"""

        # Master Data Domain
        for name, service_class in (('currency', CurrencyService), ('customer', CustomerService),
                                    ('supplier', SupplierService), ('uom', UOMService)):
            self._services[name] = service_class(
                db_session=self.db_session,
                current_user=self.current_user,
                audit_service=self._services['audit']
            )

        # Ledger Domain
        ledger_dependencies = dict(
            db_session=self.db_session,
            current_user=self.current_user,
            audit_service=self._services['audit'],
            company_service=self._services['company'],
            item_type_service=self._services['item_type'],
            transmission_queue=self._services['transmission_repository']
        )
        self._services['incoming_goods'] = IncomingGoodService(**ledger_dependencies)
        self._services['outgoing_goods'] = OutgoingGoodService(**ledger_dependencies)
        self._services['adjustment'] = AdjustmentService(**ledger_dependencies)
        self._services['beginning_balance'] = BeginningBalanceService(**ledger_dependencies)

        # Stock Opname Domain
        self._services['stock_opname'] = StockOpnameService(**ledger_dependencies)

        # Auth Domain
        self._services['user'] = UserService(
            db_session=self.db_session,
            current_user=self.current_user,
            audit_service=self._services['audit']
        )

        self._services['auth'] = AuthService(
            db_session=self.db_session,
            secret_key=self.config.get('secret_key'),
            algorithm=self.config.get('algorithm', 'HS256'),
            token_expiry_minutes=self.config.get('token_expiry_minutes', 480),
            audit_service=self._services['audit']
        )

        # Reporting Domain
        self._services['mutation_report'] = MutationReportService(
            db_session=self.db_session,
            current_user=self.current_user,
            audit_service=self._services['audit'],
            item_type_service=self._services['item_type']
        )

        # Integration Domain (client HTTP hanya dibutuhkan untuk transmisi)
        if self.insw_client is not None:
            self._services['transmission'] = TransmissionService(
                repository=self._services['transmission_repository'],
                insw_client=self.insw_client,
                max_retries=self.config.get('insw_max_retries', 3),
                current_user=self.current_user,
                stale_claim_seconds=self.config.get('insw_stale_claim_seconds', 300)
            )

    def get_service(self, service_name: str):
        """Get service by name"""
        if service_name not in self._services:
            raise ValueError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_all_services(self) -> dict:
        """Get all registered services"""
        return self._services.copy()

    # Convenience methods untuk frequently used services
    @property
    def company_service(self) -> CompanyService:
        return self._services['company']

    @property
    def currency_service(self) -> CurrencyService:
        return self._services['currency']

    @property
    def customer_service(self) -> CustomerService:
        return self._services['customer']

    @property
    def supplier_service(self) -> SupplierService:
        return self._services['supplier']

    @property
    def uom_service(self) -> UOMService:
        return self._services['uom']

    @property
    def item_type_service(self) -> ItemTypeService:
        return self._services['item_type']

    @property
    def incoming_goods_service(self) -> IncomingGoodService:
        return self._services['incoming_goods']

    @property
    def outgoing_goods_service(self) -> OutgoingGoodService:
        return self._services['outgoing_goods']

    @property
    def adjustment_service(self) -> AdjustmentService:
        return self._services['adjustment']

    @property
    def beginning_balance_service(self) -> BeginningBalanceService:
        return self._services['beginning_balance']

    @property
    def stock_opname_service(self) -> StockOpnameService:
        """Get StockOpnameService - Most critical service"""
        return self._services['stock_opname']

    @property
    def mutation_report_service(self) -> MutationReportService:
        return self._services['mutation_report']

    @property
    def transmission_service(self) -> TransmissionService:
        """Get TransmissionService (butuh insw_client)"""
        return self.get_service('transmission')

    @property
    def auth_service(self) -> AuthService:
        """Get AuthService"""
        return self._services['auth']

    @property
    def user_service(self) -> UserService:
        """Get UserService"""
        return self._services['user']

    @property
    def audit_service(self) -> AuditService:
        """Get AuditService"""
        return self._services['audit']


# Factory function untuk easy service registry creation
def create_service_registry(db_session, config: dict, current_user: str = None,
                            insw_client=None) -> ServiceRegistry:
    """Factory function untuk membuat ServiceRegistry"""
    return ServiceRegistry(db_session, config, current_user, insw_client)
