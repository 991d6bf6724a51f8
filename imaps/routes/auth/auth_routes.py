"""
Authentication Routes
=====================

CRITICAL ROUTES untuk login dan profil user
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any

from ...services import ServiceRegistry
from ...schemas import LoginSchema
from ...dependencies import AuthContext, get_auth_context, get_service_registry, get_public_service_registry
from ...responses import APIResponse

router = APIRouter()


@router.post("/login", response_model=Dict[str, Any])
async def login(
    login_data: LoginSchema,
    service_registry: ServiceRegistry = Depends(get_public_service_registry)
):
    """
    Login user dan return access token

    **Parameters:**
    - username: User username
    - password: User password

    **Returns:**
    - access_token: JWT access token
    - user: User profile data
    """
    auth_result = await service_registry.auth_service.authenticate_user(
        login_data.username, login_data.password
    )
    auth_result.pop('id', None)
    return APIResponse.success(data=auth_result, message="Login successful")


@router.get("/me")
async def get_current_user_profile(
    auth: AuthContext = Depends(get_auth_context),
    service_registry: ServiceRegistry = Depends(get_service_registry)
):
    """
    Get current user profile
    """
    user_profile = await service_registry.user_service.get_profile(auth.user_id)
    return APIResponse.success(data=user_profile, message="User profile retrieved successfully")
