"""
Student profile endpoints (sign-up details captured after first login).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.errors import InvalidArgument
from app.db.session import get_db, store_errors
from app.users.models import UserProfile

router = APIRouter(prefix="/api/student", tags=["student"])

PROFILE_FIELDS = (
    "name",
    "enrollment_no",
    "email",
    "phone",
    "course",
    "section",
    "semester",
    "github_repo_link",
)


class ProfileIn(BaseModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    enrollment_no: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    course: Optional[str] = None
    section: Optional[str] = None
    semester: Optional[str] = None
    github_repo_link: Optional[str] = None


def profile_to_dict(profile: UserProfile) -> dict:
    data = {field: getattr(profile, field) or "" for field in PROFILE_FIELDS}
    data.update({
        "user_id": profile.user_id,
        "status": profile.status,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
    })
    return data


@router.put("/profile")
def create_or_update_profile(payload: ProfileIn, db: Session = Depends(get_db)):
    """Create the profile, or merge the supplied fields into an existing one."""
    user_id = (payload.user_id or "").strip()
    if not user_id:
        raise InvalidArgument("Missing required field: user_id")

    with store_errors(db, "save profile"):
        profile = db.get(UserProfile, user_id)
        created = profile is None
        if created:
            profile = UserProfile(user_id=user_id, status="active")
            db.add(profile)

        for field in PROFILE_FIELDS:
            value = getattr(payload, field)
            if value is not None:
                setattr(profile, field, value.strip())

        db.commit()
        db.refresh(profile)

    print(f"[PROFILE] user={user_id} {'created' if created else 'updated'}", flush=True)
    return {"success": True, "profile": profile_to_dict(profile)}


@router.get("/profile")
def get_profile(userId: str | None = Query(None), db: Session = Depends(get_db)):
    if not userId or not userId.strip():
        raise InvalidArgument("Missing userId")

    with store_errors(db, "load profile"):
        profile = db.get(UserProfile, userId.strip())

    return {"profile": profile_to_dict(profile) if profile else None}
