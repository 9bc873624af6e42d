from fastapi import Request, Depends, HTTPException
from sqlalchemy.orm import Session

from app.admin.models import AdminAccount
from app.core.security import decode_access_token
from app.db.session import get_db
from app.importer.spreadsheet import QuestionImporter
from app.progress.engine import ProgressEngine
from app.progress.store import (
    DailyAssignmentStore,
    ProgressStore,
    SqlDailyAssignmentStore,
    SqlProgressStore,
)
from app.questions.store import QuestionStore, SqlQuestionStore


# ======================
# STORES
# ======================
# Tests swap these through app.dependency_overrides to run on in-memory stores.

def get_question_store(db: Session = Depends(get_db)) -> QuestionStore:
    return SqlQuestionStore(db)


def get_assignment_store(db: Session = Depends(get_db)) -> DailyAssignmentStore:
    return SqlDailyAssignmentStore(db)


def get_progress_store(db: Session = Depends(get_db)) -> ProgressStore:
    return SqlProgressStore(db)


def get_progress_engine(
    questions: QuestionStore = Depends(get_question_store),
    assignments: DailyAssignmentStore = Depends(get_assignment_store),
    progress: ProgressStore = Depends(get_progress_store),
) -> ProgressEngine:
    return ProgressEngine(questions, assignments, progress)


def get_importer(
    questions: QuestionStore = Depends(get_question_store),
) -> QuestionImporter:
    return QuestionImporter(questions)


# ======================
# ADMIN GATE
# ======================

def _extract_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization")
    token = auth_header or request.cookies.get("access_token")
    if not token:
        return None

    # Support both "Bearer <token>" and raw token values.
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token or None


def get_admin(
    request: Request,
    db: Session = Depends(get_db),
) -> AdminAccount:
    """Dependency to ensure the caller holds a token for a registered admin."""
    token = _extract_token(request)
    if not token:
        print(f"[AUTH DEBUG] reject reason=missing_token path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(token)
    if not payload or payload.get("role") != "admin" or not payload.get("sub"):
        print(f"[AUTH DEBUG] reject reason=invalid_token path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="Invalid token")

    # Re-check on every request so removed admins lose access immediately
    admin = db.query(AdminAccount).filter(AdminAccount.email == payload["sub"]).first()
    if not admin:
        print(f"[AUTH DEBUG] reject reason=not_an_admin email={payload['sub']} path={request.url.path}", flush=True)
        raise HTTPException(status_code=403, detail="Admin access required")

    return admin
