"""
Auth Domain Services
====================

AuthService (login JWT, profil) dan UserService (akun per company_code)
"""

from .auth_service import AuthService
from .user_service import UserService

__all__ = [
    'AuthService',
    'UserService',
]
