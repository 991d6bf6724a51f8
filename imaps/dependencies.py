"""
API Dependencies
================

FastAPI dependencies for the iMAPS application.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .services import create_service_registry, INSWClient
from .database import get_db_session
from .config import settings
from .services.exceptions import AuthenticationError, AuthorizationError, CompanyContextError

# Security; token yang hilang ditangani sendiri supaya hasilnya 401 dengan envelope standar
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identitas pemanggil yang diteruskan eksplisit ke setiap handler"""
    user_id: int
    username: str
    role: str
    company_code: int


def registry_config() -> dict:
    return {
        'secret_key': settings.SECRET_KEY,
        'algorithm': settings.ALGORITHM,
        'token_expiry_minutes': settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        'insw_max_retries': settings.INSW_MAX_RETRIES,
        'insw_stale_claim_seconds': settings.INSW_STALE_CLAIM_SECONDS,
    }


@lru_cache
def get_insw_client() -> INSWClient:
    """Satu INSWClient per proses; di-override di test"""
    return INSWClient(
        api_key=settings.INSW_API_KEY,
        unique_key=settings.INSW_UNIQUE_KEY,
        use_test_mode=settings.INSW_USE_TEST_MODE,
        timeout=settings.INSW_TIMEOUT_SECONDS,
    )


# Dependency untuk get current user
async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db_session=Depends(get_db_session)
) -> AuthContext:
    """Get current authenticated user beserta company_code-nya"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    auth_service = create_service_registry(db_session, registry_config()).auth_service
    token_data = await auth_service.verify_access_token(credentials.credentials)

    company_code = token_data.get('company_code')
    if company_code is None or company_code <= 0:
        raise CompanyContextError()

    return AuthContext(
        user_id=token_data['user_id'],
        username=token_data['username'],
        role=token_data['role'],
        company_code=company_code,
    )


def require_roles(*roles: str):
    """Dependency factory: tolak role di luar daftar dengan 403"""
    async def checker(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in roles:
            raise AuthorizationError(
                f"Role '{auth.role}' is not allowed to perform this action",
                required_role=', '.join(roles)
            )
        return auth
    return checker


# Dependency untuk get service registry
async def get_service_registry(
    db_session=Depends(get_db_session),
    auth: AuthContext = Depends(get_auth_context),
    insw_client=Depends(get_insw_client)
):
    """Get service registry dengan current user"""
    return create_service_registry(
        db_session=db_session,
        config=registry_config(),
        current_user=auth.username,
        insw_client=insw_client
    )


# Dependency untuk endpoints yang tidak memerlukan auth (login)
async def get_public_service_registry(db_session=Depends(get_db_session)):
    """Get service registry tanpa authentication requirement"""
    return create_service_registry(db_session=db_session, config=registry_config())
