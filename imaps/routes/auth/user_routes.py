"""
User Management Routes
======================
"""

from fastapi import APIRouter, Depends, status
from typing import Dict, Any

from ...services import ServiceRegistry
from ...schemas import UserCreateSchema
from ...dependencies import get_service_registry, require_roles
from ...responses import APIResponse

router = APIRouter()


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_roles('admin'))])
async def create_user(
    user_data: UserCreateSchema,
    service_registry: ServiceRegistry = Depends(get_service_registry)
):
    """
    Create new user

    **Requires admin role**
    """
    user = await service_registry.user_service.create(user_data.model_dump())
    return APIResponse.success(data=user, message="User created successfully")
