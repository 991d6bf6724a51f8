"""
INSW Routes
===========

Transmisi batch ke INSW, retry, tracking log, preview payload dan
utilitas mode test (cleansing, registrasi final).
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...dependencies import AuthContext, get_auth_context, get_service_registry, require_roles
from ...responses import APIResponse
from ...schemas import (
    TransmitRequestSchema, RetryRequestSchema, CleansingRequestSchema, TransmissionLogSchema,
    BatchTransmissionSchema, TransactionType, InswStatus,
)
from ...services import ServiceRegistry
from ...services.integration.converter import format_insw_date

insw_router = APIRouter()


@insw_router.post("/transmit", summary="Transmit transactions to INSW")
async def transmit(
    data: TransmitRequestSchema,
    auth: AuthContext = Depends(require_roles('admin', 'operator')),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Kirim transaksi sumber (by id) ke INSW. Kegagalan per record dikumpulkan
    dalam `data`; response tetap 200 dengan status batch success/partial/failed.
    """
    summary = await services.transmission_service.transmit_batch(
        auth.company_code, data.transaction_type, data.ids
    )
    summary = BatchTransmissionSchema.model_validate(summary).model_dump()
    results = summary.pop('results')
    return {**summary, 'data': results}


@insw_router.post("/retry", summary="Retry failed INSW transmissions")
async def retry(
    data: RetryRequestSchema,
    auth: AuthContext = Depends(require_roles('admin', 'operator')),
    services: ServiceRegistry = Depends(get_service_registry)
):
    summary = await services.transmission_service.retry_failed(
        auth.company_code, data.transaction_type, data.max_retries
    )
    summary = BatchTransmissionSchema.model_validate(summary).model_dump()
    results = summary.pop('results')
    return {**summary, 'data': results}


@insw_router.get("/logs", summary="INSW transmission logs")
async def transmission_logs(
    transaction_type: Optional[TransactionType] = Query(None),
    insw_status: Optional[InswStatus] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    logs = await services.transmission_service.get_transmission_logs(
        auth.company_code, transaction_type, insw_status, limit
    )
    return APIResponse.success(
        data=[TransmissionLogSchema.model_validate(log).model_dump() for log in logs],
        message=f"{len(logs)} transmission logs"
    )


@insw_router.get("/convert/{transaction_type}", summary="Preview INSW payloads")
async def convert_preview(
    transaction_type: TransactionType,
    ids: List[int] = Query(..., min_length=1),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """Konversi ke format INSW tanpa mengirim; error validasi ikut dikembalikan"""
    previews = await services.transmission_service.preview_payloads(
        auth.company_code, transaction_type, ids
    )
    return APIResponse.success(data=previews, message=f"{len(previews)} payloads converted")


@insw_router.get("/transaksi/{activity_code}", summary="Fetch transactions registered at INSW")
async def get_insw_transaksi(
    activity_code: str,
    start_date: date = Query(...),
    end_date: date = Query(...),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    response = await services.insw_client.get_transaksi(
        activity_code, format_insw_date(start_date), format_insw_date(end_date)
    )
    return APIResponse.success(data=response)


@insw_router.get("/dokumen", summary="Fetch customs document detail from INSW")
async def get_insw_dokumen(
    nomor_dokumen: str = Query(..., min_length=1),
    auth: AuthContext = Depends(get_auth_context),
    services: ServiceRegistry = Depends(get_service_registry)
):
    response = await services.insw_client.get_dokumen(nomor_dokumen)
    return APIResponse.success(data=response)


@insw_router.post("/cleansing", summary="Delete INSW test data (test mode only)")
async def cleansing(
    data: CleansingRequestSchema,
    auth: AuthContext = Depends(require_roles('admin')),
    services: ServiceRegistry = Depends(get_service_registry)
):
    response = await services.insw_client.cleansing(data.npwp)
    return APIResponse.success(data=response, message="INSW test data cleansing requested")


@insw_router.post("/registrasi-final", summary="Final INSW registration (test mode only)")
async def registrasi_final(
    auth: AuthContext = Depends(require_roles('admin')),
    services: ServiceRegistry = Depends(get_service_registry)
):
    response = await services.insw_client.registrasi_final()
    return APIResponse.success(data=response, message="INSW final registration requested")
