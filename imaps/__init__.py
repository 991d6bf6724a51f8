"""
iMAPS Application Factory
=========================

Pusat perakitan aplikasi FastAPI menggunakan Application Factory Pattern.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pydantic import ValidationError as PydanticValidationError
import logging
import time
import uuid

# Import semua router dari modulnya masing-masing
from .routes.auth import auth_router, user_router
from .routes.master import master_router
from .routes.ledger import incoming_router, outgoing_router, adjustment_router, beginning_balance_router
from .routes.stock_opname import stock_opname_router
from .routes.insw import insw_router
from .routes.report import report_router

from .services.exceptions import (
    IMAPSException, ValidationError, NotFoundError, ConflictError, StateConflictError,
    BusinessRuleError, AuthenticationError, AuthorizationError, CompanyContextError,
    INSWIntegrationError,
)
from .responses import APIResponse
from .logging_config import configure_logging
from .config import settings

logger = logging.getLogger(__name__)

# Status HTTP per exception; lookup mengikuti MRO jadi subclass didaftarkan terpisah
EXCEPTION_STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    CompanyContextError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StateConflictError: status.HTTP_409_CONFLICT,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    INSWIntegrationError: status.HTTP_502_BAD_GATEWAY,
}


def pydantic_errors_to_envelope(errors) -> list:
    """Ubah error pydantic menjadi [{field, code, message}]"""
    converted = []
    for error in errors:
        location = [str(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path')]
        converted.append({
            'field': '.'.join(location) or None,
            'code': error.get('type', 'value_error').upper(),
            'message': error.get('msg', 'Invalid value'),
        })
    return converted


def setup_middleware(app: FastAPI):
    """Setup semua middleware aplikasi."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS
    )

    @app.middleware("http")
    async def add_request_id_and_process_time(request: Request, call_next):
        request_id = str(uuid.uuid4())
        start_time = time.time()

        request.state.request_id = request_id
        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Setup semua custom exception handlers; semua error memakai failure envelope."""

    async def imaps_exception_handler(request: Request, exc: IMAPSException):
        status_code = EXCEPTION_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    for exception_class in EXCEPTION_STATUS_CODES:
        app.add_exception_handler(exception_class, imaps_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=APIResponse.failed("Validation failed", pydantic_errors_to_envelope(exc.errors()))
        )

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=APIResponse.failed("Validation failed", pydantic_errors_to_envelope(exc.errors()))
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse.failed("An unexpected error occurred",
                                       [{'field': None, 'code': 'INTERNAL_ERROR',
                                         'message': 'An unexpected error occurred'}])
        )


def setup_routes(app: FastAPI):
    """Daftarkan (include) semua router ke aplikasi."""
    # Endpoint sistem
    @app.get("/health", tags=["System"])
    async def health_check():
        return {"status": "healthy", "timestamp": time.time()}

    @app.get("/", tags=["System"])
    async def root():
        return {"message": "iMAPS API", "version": "1.0.0", "docs": "/docs"}

    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(user_router, prefix="/api/users", tags=["User Management"])
    app.include_router(master_router, prefix="/api/master", tags=["Master Data"])

    # WMS ingest
    app.include_router(incoming_router, prefix="/api/v1/incoming-goods", tags=["WMS - Incoming Goods"])
    app.include_router(outgoing_router, prefix="/api/v1/outgoing-goods", tags=["WMS - Outgoing Goods"])
    app.include_router(adjustment_router, prefix="/api/v1/adjustments", tags=["WMS - Adjustments"])
    app.include_router(stock_opname_router, prefix="/api/v1/stock-opname", tags=["WMS - Stock Opname"])
    app.include_router(beginning_balance_router, prefix="/api/customs/beginning-balances",
                       tags=["Customs - Beginning Balances"])

    app.include_router(report_router, prefix="/api/reports", tags=["Reports"])
    app.include_router(insw_router, prefix="/api/insw", tags=["INSW Integration"])


def create_app() -> FastAPI:
    """
    Application Factory: Membuat dan mengkonfigurasi instance FastAPI.
    """
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("iMAPS API starting up")
        yield
        logger.info("iMAPS API shutting down")

    # 1. Buat instance FastAPI
    app = FastAPI(
        title="iMAPS Bonded Zone Inventory API",
        description="Inventory, stock opname dan pelaporan INSW untuk Kawasan Berikat",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # 2. Setup Middleware
    setup_middleware(app)

    # 3. Setup Exception Handlers
    setup_exception_handlers(app)

    # 4. Setup Routes
    setup_routes(app)

    logger.info("FastAPI app created and configured")
    return app
