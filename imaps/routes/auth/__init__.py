"""
Auth Routes
===========

Login berbasis JWT (company_code ada di claim) dan user management untuk admin
"""

from .auth_routes import router as auth_router
from .user_routes import router as user_router

__all__ = ['auth_router', 'user_router']
