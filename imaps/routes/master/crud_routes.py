"""
Master Data CRUD Routes
=======================

Router factory untuk resource master berbasis CRUDService
(companies, currencies, customers, suppliers, uoms).
"""

from typing import Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from ...dependencies import get_service_registry, require_roles
from ...responses import APIResponse
from ...services import ServiceRegistry


def build_crud_router(service_name: str, label: str,
                      create_schema: Type[BaseModel], update_schema: Type[BaseModel]) -> APIRouter:
    """Buat router CRUD standar; operasi tulis hanya untuk admin"""
    router = APIRouter()

    @router.post("", status_code=status.HTTP_201_CREATED, summary=f"Create {label}",
                 dependencies=[Depends(require_roles('admin'))])
    async def create_entity(
        data: create_schema,
        services: ServiceRegistry = Depends(get_service_registry)
    ):
        entity = await services.get_service(service_name).create(data.model_dump())
        return APIResponse.success(data=entity, message=f"{label} created successfully")

    @router.get("", summary=f"List {label}")
    async def list_entities(
        page: int = Query(1, ge=1),
        per_page: int = Query(20, ge=1, le=100),
        search: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None),
        sort_order: str = Query('asc', pattern='^(asc|desc)$'),
        services: ServiceRegistry = Depends(get_service_registry)
    ):
        result = await services.get_service(service_name).list(
            page=page, per_page=per_page, search=search, sort_by=sort_by, sort_order=sort_order
        )
        return APIResponse.paginated(data=result['items'], pagination=result['pagination'],
                                     message=f"{label} retrieved successfully")

    @router.get("/{entity_id}", summary=f"Get {label}")
    async def get_entity(
        entity_id: int,
        services: ServiceRegistry = Depends(get_service_registry)
    ):
        entity = await services.get_service(service_name).get_by_id(entity_id)
        return APIResponse.success(data=entity)

    @router.put("/{entity_id}", summary=f"Update {label}",
                dependencies=[Depends(require_roles('admin'))])
    async def update_entity(
        entity_id: int,
        data: update_schema,
        services: ServiceRegistry = Depends(get_service_registry)
    ):
        entity = await services.get_service(service_name).update(entity_id, data.model_dump(exclude_unset=True))
        return APIResponse.success(data=entity, message=f"{label} updated successfully")

    @router.delete("/{entity_id}", summary=f"Delete {label}",
                   dependencies=[Depends(require_roles('admin'))])
    async def delete_entity(
        entity_id: int,
        services: ServiceRegistry = Depends(get_service_registry)
    ):
        result = await services.get_service(service_name).delete(entity_id)
        return APIResponse.success(data=result, message=f"{label} deleted successfully")

    return router
