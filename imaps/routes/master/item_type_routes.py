"""
Item Type Routes
================

Read-only; item type diisi lewat seed (manage.py seed-item-types)
"""

from fastapi import APIRouter, Depends, Query

from ...dependencies import get_service_registry
from ...responses import APIResponse
from ...services import ServiceRegistry

item_type_router = APIRouter()


@item_type_router.get("", summary="List item types")
async def list_item_types(
    include_inactive: bool = Query(False),
    services: ServiceRegistry = Depends(get_service_registry)
):
    item_types = await services.item_type_service.list(include_inactive=include_inactive)
    return APIResponse.success(data=item_types, message="Item types retrieved successfully")
