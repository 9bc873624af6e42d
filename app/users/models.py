from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from app.db.base import Base

# Account states an admin can set from the users panel
USER_STATUSES = ("active", "inactive", "banned")


class UserProfile(Base):
    __tablename__ = "user_profiles"

    # Identity comes from the external sign-in provider
    user_id = Column(String(128), primary_key=True, index=True)

    name = Column(String(255), nullable=False, default="")
    enrollment_no = Column(String(64), nullable=False, default="")
    email = Column(String(255), nullable=False, default="", index=True)
    phone = Column(String(32), nullable=False, default="")
    course = Column(String(128), nullable=False, default="")
    section = Column(String(64), nullable=False, default="")
    semester = Column(String(32), nullable=False, default="")
    github_repo_link = Column(String(512), nullable=False, default="")

    status = Column(String(16), nullable=False, default="active")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
