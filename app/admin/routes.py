"""
Admin panel API.

POST   /api/admin/login             → exchange email/password for a token
GET    /api/admin/users             → profiles merged with progress
GET    /api/admin/stats             → aggregate numbers for the dashboard
PATCH  /api/admin/users/{user_id}   → edit profile fields / status
DELETE /api/admin/users/{user_id}   → remove profile and progress
POST   /api/admin/upload-questions  → parse a CSV/XLSX upload for review
GET    /api/admin/questions         → every stored question
POST   /api/admin/questions         → bulk-save reviewed questions
"""
import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.admin.models import AdminAccount
from app.core.config import CHALLENGE_DAYS
from app.core.deps import get_admin, get_importer, get_progress_store, get_question_store
from app.core.errors import InvalidArgument
from app.core.security import create_access_token, verify_password
from app.db.session import get_db, store_errors
from app.importer.spreadsheet import QuestionImporter
from app.progress.store import ProgressStore
from app.questions.schemas import QuestionBatch
from app.questions.store import QuestionStore
from app.users.models import USER_STATUSES, UserProfile
from app.users.routes import PROFILE_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


class AdminLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    updateData: dict[str, Any] = {}


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =========================
# LOGIN
# =========================
@router.post("/login")
def admin_login(payload: AdminLogin, db: Session = Depends(get_db)):
    email = (payload.email or "").strip().lower()
    if not email or not payload.password:
        raise InvalidArgument("Email and password are required")

    with store_errors(db, "load admin account"):
        admin = db.query(AdminAccount).filter(AdminAccount.email == email).first()

    if not admin or not verify_password(payload.password, admin.password_hash):
        logger.warning("[ADMIN] invalid credentials for %s", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": admin.email, "role": "admin"})
    logger.info("[ADMIN] login successful for %s", admin.email)
    return {
        "success": True,
        "admin": {"email": admin.email},
        "accessToken": token,
    }


# =========================
# USERS
# =========================
@router.get("/users")
def list_users(
    db: Session = Depends(get_db),
    progress: ProgressStore = Depends(get_progress_store),
    admin: AdminAccount = Depends(get_admin),
):
    with store_errors(db, "load users"):
        profiles = db.query(UserProfile).order_by(UserProfile.created_at.asc()).all()

    users = []
    for p in profiles:
        record = progress.get(p.user_id)
        users.append({
            "id": p.user_id,
            "name": p.name or "Unknown",
            "email": p.email or "No email",
            "streak": record.current_streak if record else 0,
            "problemsSolved": len(record.completed_questions) if record else 0,
            "lastActive": _iso(record.last_active_date) if record else _iso(p.created_at),
            "status": p.status or "active",
            "joinDate": _iso(p.created_at),
        })
    return {"users": users}


@router.get("/stats")
def system_stats(
    db: Session = Depends(get_db),
    progress: ProgressStore = Depends(get_progress_store),
    questions: QuestionStore = Depends(get_question_store),
    admin: AdminAccount = Depends(get_admin),
):
    with store_errors(db, "load users"):
        profiles = db.query(UserProfile).all()

    streaks = []
    submissions = 0
    for p in profiles:
        record = progress.get(p.user_id)
        streaks.append(record.current_streak if record else 0)
        submissions += len(record.completed_questions) if record else 0

    return {
        "stats": {
            "totalUsers": len(profiles),
            "activeUsers": sum(1 for p in profiles if (p.status or "active") == "active"),
            "totalProblems": CHALLENGE_DAYS,
            "totalQuestions": questions.count(),
            "totalSubmissions": submissions,
            "avgStreak": (sum(streaks) / len(streaks)) if streaks else 0,
        }
    }


@router.patch("/users/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: AdminAccount = Depends(get_admin),
):
    allowed = set(PROFILE_FIELDS) | {"status"}
    unknown = sorted(set(payload.updateData) - allowed)
    if unknown:
        raise InvalidArgument(f"Fields cannot be updated: {', '.join(unknown)}")

    status = payload.updateData.get("status")
    if status is not None and status not in USER_STATUSES:
        raise InvalidArgument(f"status must be one of: {', '.join(USER_STATUSES)}")

    with store_errors(db, "update user"):
        profile = db.get(UserProfile, user_id)
        if not profile:
            raise HTTPException(status_code=404, detail="User not found")

        for field, value in payload.updateData.items():
            setattr(profile, field, "" if value is None else str(value).strip())
        db.commit()

    logger.info("[ADMIN] %s updated user=%s fields=%s", admin.email, user_id, sorted(payload.updateData))
    return {"success": True}


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    progress: ProgressStore = Depends(get_progress_store),
    admin: AdminAccount = Depends(get_admin),
):
    with store_errors(db, "delete user"):
        profile = db.get(UserProfile, user_id)
        if profile:
            db.delete(profile)
            db.commit()

    had_progress = progress.delete(user_id)
    if not profile and not had_progress:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("[ADMIN] %s deleted user=%s", admin.email, user_id)
    return {"success": True}


# =========================
# QUESTIONS
# =========================
@router.post("/upload-questions")
def upload_questions(
    file: UploadFile | None = File(None),
    importer: QuestionImporter = Depends(get_importer),
    admin: AdminAccount = Depends(get_admin),
):
    if file is None or not file.filename:
        raise InvalidArgument("No file uploaded")

    data = file.file.read()
    questions = importer.parse_upload(data, file.filename)
    return {
        "success": True,
        "questions": [q.to_public() for q in questions],
        "count": len(questions),
    }


@router.get("/questions")
def list_questions(
    questions: QuestionStore = Depends(get_question_store),
    admin: AdminAccount = Depends(get_admin),
):
    return {"questions": [q.to_public() for q in questions.get_all()]}


@router.post("/questions")
def save_questions(
    payload: QuestionBatch,
    importer: QuestionImporter = Depends(get_importer),
    admin: AdminAccount = Depends(get_admin),
):
    saved = importer.bulk_save(payload.questions)
    logger.info("[ADMIN] %s saved %d questions", admin.email, saved)
    return {
        "success": True,
        "message": f"Successfully saved {saved} questions",
    }
