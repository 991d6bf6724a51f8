"""
User Service
============

Service untuk User management dan profile
"""

from typing import Dict, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import BaseService, transactional, audit_log
from ..exceptions import NotFoundError
from ...models import User
from ...schemas import UserSchema, UserCreateSchema


class UserService(BaseService):
    """Service untuk User management"""

    def __init__(self, db_session: AsyncSession, current_user: str = None, audit_service=None):
        super().__init__(db_session, current_user, audit_service)

    @transactional
    @audit_log('CREATE', 'User')
    async def create(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create user; username dan email harus unik"""
        data = UserCreateSchema.model_validate(user_data).model_dump()

        await self._validate_unique_field(User, 'username', data['username'],
                                          error_message=f"Username '{data['username']}' already exists")
        await self._validate_unique_field(User, 'email', data['email'],
                                          error_message=f"Email '{data['email']}' already exists")

        password = data.pop('password')
        user = User(**data)
        user.set_password(password)

        self.db_session.add(user)
        await self.db_session.flush()

        return UserSchema.model_validate(user).model_dump()

    async def get_profile(self, user_id: int) -> Dict[str, Any]:
        user = await self._get_or_404(User, user_id)
        return UserSchema.model_validate(user).model_dump()

    async def get_by_username(self, username: str) -> User:
        result = await self.db_session.execute(select(User).filter(User.username == username))
        user = result.scalars().first()
        if not user:
            raise NotFoundError('User', username)
        return user
