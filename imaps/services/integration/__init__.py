"""
Integration Services
====================

Services untuk integrasi INSW (Indonesia National Single Window)
"""

from .insw_client import INSWClient
from .repository import (
    TransmissionRepository, SqlAlchemyTransmissionRepository, InMemoryTransmissionRepository,
)
from .transmission_service import TransmissionService, TRANSACTION_TYPES

__all__ = [
    'INSWClient',
    'TransmissionRepository',
    'SqlAlchemyTransmissionRepository',
    'InMemoryTransmissionRepository',
    'TransmissionService',
    'TRANSACTION_TYPES',
]
