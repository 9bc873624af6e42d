from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.db.base import Base


class AdminAccount(Base):
    """
    Panel administrators. Only emails present here pass the admin gate.
    Passwords are stored as PBKDF2 hashes (see app.core.security).
    """
    __tablename__ = "admin_accounts"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
