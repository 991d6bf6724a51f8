"""
Authentication Service
======================

Login user dan verifikasi JWT access token
"""

import jwt
from datetime import datetime, timedelta
from typing import Dict, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import BaseService, transactional, audit_log
from ..exceptions import AuthenticationError
from ...models import User
from ...schemas import UserSchema, LoginResponseSchema


class AuthService(BaseService):
    """Service untuk Authentication"""

    def __init__(self, db_session: AsyncSession, secret_key: str, algorithm: str = 'HS256',
                 token_expiry_minutes: int = 480, audit_service=None):
        super().__init__(db_session, audit_service=audit_service)
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_expiry_minutes = token_expiry_minutes

    @transactional
    @audit_log('LOGIN', 'User')
    async def authenticate_user(self, username: str, password: str) -> Dict[str, Any]:
        """Authenticate user dan buat access token"""
        result = await self.db_session.execute(select(User).filter(User.username == username))
        user = result.scalars().first()

        if not user or not user.check_password(password):
            raise AuthenticationError("Invalid username or password")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        user.last_login = datetime.utcnow()
        self.current_user = user.username

        response_data = {
            'access_token': self._generate_access_token(user),
            'token_type': 'Bearer',
            'expires_in': self.token_expiry_minutes * 60,
            'user': UserSchema.model_validate(user),
        }
        data = LoginResponseSchema.model_validate(response_data).model_dump(mode='json')
        # id dipakai audit_log sebagai entity_id
        data['id'] = user.id
        return data

    async def verify_access_token(self, access_token: str) -> Dict[str, Any]:
        """Verify access token dan return identitas user"""
        try:
            payload = jwt.decode(access_token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Access token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid access token")

        if payload.get('type') != 'access':
            raise AuthenticationError("Invalid token type")

        result = await self.db_session.execute(
            select(User).filter(User.id == payload.get('user_id'), User.is_active.is_(True))
        )
        user = result.scalars().first()
        if not user:
            raise AuthenticationError("User not found or inactive")

        return {
            'user_id': user.id,
            'username': user.username,
            'role': user.role,
            'company_code': user.company_code,
        }

    def _generate_access_token(self, user: User) -> str:
        """Generate JWT access token"""
        now = datetime.utcnow()
        payload = {
            'user_id': user.id,
            'username': user.username,
            'role': user.role,
            'type': 'access',
            'iat': now,
            'exp': now + timedelta(minutes=self.token_expiry_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
