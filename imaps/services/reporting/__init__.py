"""
Reporting Domain Services
=========================

Services untuk laporan mutasi dan audit trail
"""

from .mutation_report import MutationReportService
from .audit_service import AuditService

__all__ = [
    'MutationReportService',
    'AuditService'
]
