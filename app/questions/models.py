from sqlalchemy import Column, String, Text, DateTime, JSON
from sqlalchemy.sql import func

from app.db.base import Base


class QuestionRecord(Base):
    __tablename__ = "questions"

    # Storage id (uuid hex for new rows). Never reassigned once written.
    id = Column(String(64), primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    # Free text, conventionally "Easy" / "Medium" / "Hard"
    difficulty = Column(String(64), nullable=True)
    category = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=True)  # ["Array", "Hash Table"]
    example = Column(Text, nullable=True)
    constraints = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
