from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pathlib import Path

from app.db.session import get_db
from app.db.base import engine
from app.progress.models import DailyAssignmentRecord, UserProgressRecord
from app.questions.models import QuestionRecord
from app.users.models import UserProfile

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/assignments")
def debug_assignments(db: Session = Depends(get_db)):
    rows = (
        db.query(DailyAssignmentRecord)
        .order_by(DailyAssignmentRecord.assignment_date.desc())
        .all()
    )
    return [
        {
            "date": r.assignment_date,
            "question_id": r.question_id,
            "title": (r.question or {}).get("title"),
            "assigned_at": str(r.assigned_at or ""),
        }
        for r in rows
    ]


@router.get("/diagnostics/db")
def db_diagnostics(db: Session = Depends(get_db)):
    """
    Lightweight DB diagnostics for debugging deployments.

    This endpoint is meant to be exposed only when ENABLE_DEBUG_ROUTES=1.
    It intentionally avoids leaking secrets while still being useful.
    """
    url = engine.url
    backend = url.get_backend_name()
    rendered = url.render_as_string(hide_password=True)

    info = {
        "backend": backend,
        "url": rendered,
        "counts": {
            "questions": db.query(QuestionRecord).count(),
            "daily_assignments": db.query(DailyAssignmentRecord).count(),
            "user_progress": db.query(UserProgressRecord).count(),
            "user_profiles": db.query(UserProfile).count(),
        },
    }

    if backend == "sqlite":
        db_path = Path(url.database or "").resolve()
        exists = db_path.exists()
        size = db_path.stat().st_size if exists else 0
        info.update(
            {
                "sqlite_path": str(db_path),
                "sqlite_exists": exists,
                "sqlite_size_bytes": size,
            }
        )
    else:
        info.update(
            {
                "database": url.database,
                "host": url.host,
                "port": url.port,
                "drivername": url.drivername,
            }
        )

    return info
