"""
User Progress Model + Daily Assignment Model
Tracks per-user completions/streaks and the question pinned to each day.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class UserProgressRecord(Base):
    """
    One row per user, created on the first completion.
    total_solved mirrors len(completed) and is rewritten on every completion.
    """
    __tablename__ = "user_progress"

    user_id = Column(String(128), primary_key=True, index=True)

    current_streak = Column(Integer, nullable=False, default=0)
    # Server local clock, naive
    last_active_date = Column(DateTime, nullable=False)
    total_solved = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Bumped on every write; an UPDATE against a stale version raises StaleDataError
    version = Column(Integer, nullable=False, server_default="1")

    __mapper_args__ = {"version_id_col": version}

    completed = relationship(
        "CompletedQuestionRecord",
        order_by="CompletedQuestionRecord.id",
        cascade="all, delete-orphan",
        back_populates="progress",
    )


class CompletedQuestionRecord(Base):
    __tablename__ = "completed_questions"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        String(128),
        ForeignKey("user_progress.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id = Column(String(64), nullable=False)
    completed_at = Column(DateTime, nullable=False)
    # Snapshot of the difficulty label at completion time
    difficulty = Column(String(64), nullable=True)

    progress = relationship("UserProgressRecord", back_populates="completed")


class DailyAssignmentRecord(Base):
    """
    The question pinned to a calendar date. The date string is the primary
    key, so a second insert for the same day fails instead of overwriting.
    """
    __tablename__ = "daily_assignments"

    assignment_date = Column(String(10), primary_key=True)  # YYYY-MM-DD
    question_id = Column(String(64), nullable=False)

    # Content snapshot so the day's question stays stable after edits
    question = Column(JSON, nullable=False)

    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
