import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import StoreUnavailable
from app.db.base import engine

logger = logging.getLogger(__name__)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency: yields a database session and always closes it."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(db: Session, action: str):
    """
    Roll back and re-raise database failures as StoreUnavailable.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[DB] %s failed: %r", action, exc)
        raise StoreUnavailable(f"Failed to {action}") from exc
