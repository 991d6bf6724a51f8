"""
WMS Ingest Routes
=================

Pemasukan, pengeluaran dan adjustment barang dari WMS. company_code selalu diambil dari
token pemanggil, tidak dari body.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...dependencies import AuthContext, get_auth_context, get_service_registry, require_roles
from ...responses import APIResponse
from ...schemas import IncomingGoodCreateSchema, OutgoingGoodCreateSchema, AdjustmentCreateSchema
from ...services import ServiceRegistry

WRITE_ROLES = ('admin', 'operator', 'wms')

incoming_router = APIRouter()
outgoing_router = APIRouter()
adjustment_router = APIRouter()


@incoming_router.post("", status_code=status.HTTP_201_CREATED, summary="Record incoming goods")
async def create_incoming_good(
    data: IncomingGoodCreateSchema,
    auth: AuthContext = Depends(require_roles(*WRITE_ROLES)),
    services: ServiceRegistry = Depends(get_service_registry)
):
    incoming = await services.incoming_goods_service.create(auth.company_code, data.model_dump())
    return APIResponse.success(data=incoming, message="Incoming goods recorded successfully")


@incoming_router.get("", summary="List incoming goods")
async def list_incoming_goods(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.incoming_goods_service.list(
        auth.company_code, start_date=start_date, end_date=end_date, page=page, per_page=per_page
    )
    return APIResponse.paginated(data=result['items'], pagination=result['pagination'])


@incoming_router.get("/{incoming_id}", summary="Get incoming goods")
async def get_incoming_good(
    incoming_id: int,
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    incoming = await services.incoming_goods_service.get(auth.company_code, incoming_id)
    return APIResponse.success(data=incoming)


@outgoing_router.post("", status_code=status.HTTP_201_CREATED, summary="Record outgoing goods")
async def create_outgoing_good(
    data: OutgoingGoodCreateSchema,
    auth: AuthContext = Depends(require_roles(*WRITE_ROLES)),
    services: ServiceRegistry = Depends(get_service_registry)
):
    outgoing = await services.outgoing_goods_service.create(auth.company_code, data.model_dump())
    return APIResponse.success(data=outgoing, message="Outgoing goods recorded successfully")


@outgoing_router.get("", summary="List outgoing goods")
async def list_outgoing_goods(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.outgoing_goods_service.list(
        auth.company_code, start_date=start_date, end_date=end_date, page=page, per_page=per_page
    )
    return APIResponse.paginated(data=result['items'], pagination=result['pagination'])


@outgoing_router.get("/{outgoing_id}", summary="Get outgoing goods")
async def get_outgoing_good(
    outgoing_id: int,
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    outgoing = await services.outgoing_goods_service.get(auth.company_code, outgoing_id)
    return APIResponse.success(data=outgoing)


@adjustment_router.post("", status_code=status.HTTP_201_CREATED, summary="Record stock adjustment")
async def create_adjustment(
    data: AdjustmentCreateSchema,
    auth: AuthContext = Depends(require_roles(*WRITE_ROLES)),
    services: ServiceRegistry = Depends(get_service_registry)
):
    adjustment = await services.adjustment_service.create(auth.company_code, data.model_dump())
    return APIResponse.success(data=adjustment, message="Adjustment recorded successfully")


@adjustment_router.get("", summary="List stock adjustments")
async def list_adjustments(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.adjustment_service.list(
        auth.company_code, start_date=start_date, end_date=end_date, page=page, per_page=per_page
    )
    return APIResponse.paginated(data=result['items'], pagination=result['pagination'])


@adjustment_router.get("/{adjustment_id}", summary="Get stock adjustment")
async def get_adjustment(
    adjustment_id: int,
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    adjustment = await services.adjustment_service.get(auth.company_code, adjustment_id)
    return APIResponse.success(data=adjustment)
