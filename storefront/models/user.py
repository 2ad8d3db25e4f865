from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, String

from storefront.database.connection import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default="user")  # user / admin
    is_active = Column(Boolean, default=True)

    # sha256 hex of the emailed reset token
    reset_password_token = Column(String, nullable=True, index=True)
    reset_password_expire = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
