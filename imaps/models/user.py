from sqlalchemy import Column, Integer, String, Boolean, DateTime
from werkzeug.security import generate_password_hash, check_password_hash

from .base import BaseModel


class User(BaseModel):
    """User aplikasi; setiap user terikat ke satu company_code"""
    __tablename__ = 'users'

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100))

    # admin, operator, viewer, wms
    role = Column(String(20), nullable=False, default='viewer')
    company_code = Column(Integer, index=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime)

    def set_password(self, password):
        """Set password dengan proper hashing"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.username}>'
