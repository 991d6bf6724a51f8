"""
Report Routes
=============
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...dependencies import AuthContext, get_auth_context, get_service_registry, require_roles
from ...responses import APIResponse
from ...services import ServiceRegistry

report_router = APIRouter()


@report_router.get("/mutation", summary="Stock mutation report")
async def mutation_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    item_type: Optional[str] = Query(None),
    item_code: Optional[str] = Query(None),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """Beginning, incoming, outgoing, adjustment dan ending per item untuk periode"""
    report = await services.mutation_report_service.generate(
        auth.company_code, start_date, end_date, item_type=item_type, item_code=item_code
    )
    return APIResponse.success(data=report, message=f"{len(report['rows'])} items in mutation report")


@report_router.get("/audit-trail", summary="Audit trail",
                   dependencies=[Depends(require_roles('admin'))])
async def audit_trail(
    entity_type: Optional[str] = Query(None),
    entity_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    services: ServiceRegistry = Depends(get_service_registry)
):
    result = await services.audit_service.get_audit_trail(
        entity_type=entity_type, entity_id=entity_id, page=page, per_page=per_page
    )
    return APIResponse.paginated(data=result['audit_logs'], pagination=result['pagination'])
