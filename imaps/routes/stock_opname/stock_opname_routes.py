"""
Stock Opname Routes
===================

POST membuat opname ACTIVE, PATCH melakukan transisi CONFIRMED / CANCELLED,
GET untuk list dan detail per wms_id.
"""

from datetime import date
from typing import Optional, Literal

from fastapi import APIRouter, Depends, Query, status

from ...dependencies import AuthContext, get_auth_context, get_service_registry, require_roles
from ...responses import APIResponse
from ...schemas import StockOpnameCreateSchema, StockOpnameUpdateSchema
from ...services import ServiceRegistry

WRITE_ROLES = ('admin', 'operator', 'wms')

stock_opname_router = APIRouter()


@stock_opname_router.post("", status_code=status.HTTP_201_CREATED, summary="Create stock opname")
async def create_stock_opname(
    data: StockOpnameCreateSchema,
    auth: AuthContext = Depends(require_roles(*WRITE_ROLES)),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Simpan hasil hitung fisik. Payload identik untuk opname ACTIVE yang sama
    mengembalikan opname yang sudah ada.
    """
    opname = await services.stock_opname_service.create_opname(auth.company_code, data.model_dump())
    return APIResponse.success(data=opname, message="Stock opname saved")


@stock_opname_router.patch("", summary="Confirm or cancel stock opname")
async def update_stock_opname(
    data: StockOpnameUpdateSchema,
    auth: AuthContext = Depends(require_roles(*WRITE_ROLES)),
    services: ServiceRegistry = Depends(get_service_registry)
):
    service = services.stock_opname_service
    items = [item.model_dump() for item in data.items] if data.items is not None else None

    if data.status == 'CONFIRMED':
        opname = await service.confirm_opname(auth.company_code, data.wms_id, items=items, notes=data.notes)
        message = "Stock opname confirmed"
    else:
        opname = await service.cancel_opname(auth.company_code, data.wms_id, notes=data.notes)
        message = "Stock opname cancelled"
    return APIResponse.success(data=opname, message=message)


@stock_opname_router.get("", summary="List stock opname")
async def list_stock_opnames(
    status_filter: Optional[Literal['ACTIVE', 'CONFIRMED', 'CANCELLED']] = Query(None, alias='status'),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.stock_opname_service.list_opnames(
        auth.company_code, status=status_filter, start_date=start_date, end_date=end_date,
        page=page, per_page=per_page
    )
    return APIResponse.paginated(data=result['items'], pagination=result['pagination'])


@stock_opname_router.get("/{wms_id}", summary="Get stock opname")
async def get_stock_opname(
    wms_id: str,
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    opname = await services.stock_opname_service.get_opname(auth.company_code, wms_id)
    return APIResponse.success(data=opname)
