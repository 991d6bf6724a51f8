"""
User Domain Schemas
===================

Schemas untuk User dan Authentication
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

from .base import BaseSchema, TimestampMixin

UserRole = Literal['admin', 'operator', 'viewer', 'wms']


class UserSchema(BaseSchema, TimestampMixin):
    """Schema untuk User model (tanpa password_hash)"""
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    role: str = 'viewer'
    company_code: Optional[int] = None
    is_active: bool = True
    last_login: Optional[datetime] = None


class UserCreateSchema(BaseSchema):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=100)
    password: str = Field(min_length=8, max_length=128)
    full_name: Optional[str] = Field(None, max_length=100)
    role: UserRole = 'viewer'
    company_code: Optional[int] = None

    @field_validator('email')
    def email_format(cls, v):
        if '@' not in v or v.startswith('@') or v.endswith('@'):
            raise ValueError('email is not valid')
        return v.lower()

    @field_validator('company_code')
    def company_code_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError('company_code must be a positive integer')
        return v


class LoginSchema(BaseSchema):
    """Schema untuk login request"""
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)


class LoginResponseSchema(BaseModel):
    """Schema untuk login response"""
    access_token: str
    token_type: str = 'Bearer'
    expires_in: int
    user: UserSchema
