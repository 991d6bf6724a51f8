"""
Beginning Balance Routes
========================

Saldo awal per item; body berupa array saldo.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...dependencies import AuthContext, get_auth_context, get_service_registry, require_roles
from ...responses import APIResponse
from ...schemas import BeginningBalanceCreateSchema
from ...services import ServiceRegistry

beginning_balance_router = APIRouter()


@beginning_balance_router.post("", status_code=status.HTTP_201_CREATED, summary="Record beginning balances")
async def create_beginning_balances(
    rows: List[BeginningBalanceCreateSchema],
    auth: AuthContext = Depends(require_roles('admin', 'operator')),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.beginning_balance_service.create_many(
        auth.company_code, [row.model_dump() for row in rows]
    )
    return APIResponse.success(data=result['items'],
                               message=f"{len(result['items'])} beginning balances recorded")


@beginning_balance_router.get("", summary="List beginning balances")
async def list_beginning_balances(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    item_type: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.beginning_balance_service.list(
        auth.company_code, start_date=start_date, end_date=end_date, item_type=item_type,
        page=page, per_page=per_page
    )
    return APIResponse.paginated(data=result['items'], pagination=result['pagination'])
