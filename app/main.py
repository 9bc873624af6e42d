import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import APP_NAME, ALLOWED_ORIGINS, ENABLE_DEBUG_ROUTES, LOG_LEVEL
from app.core.errors import CoreError, core_error_handler, validation_error_handler
from app.db.base import Base, engine

# Import models so create_all picks them up
from app.admin.models import AdminAccount  # noqa: F401
from app.progress.models import UserProgressRecord, CompletedQuestionRecord, DailyAssignmentRecord  # noqa: F401
from app.questions.models import QuestionRecord  # noqa: F401
from app.users.models import UserProfile  # noqa: F401

from app.admin.routes import router as admin_router
from app.progress.routes import router as progress_router
from app.users.routes import router as users_router
from app.web.debug_routes import router as debug_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(levelname)s: %(name)s %(message)s",
)

app = FastAPI(title=APP_NAME, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CoreError, core_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Only expose debug routes (DB diagnostics) when explicitly enabled.
if ENABLE_DEBUG_ROUTES:
    app.include_router(debug_router)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)

# Include routers
app.include_router(progress_router)
app.include_router(users_router)
app.include_router(admin_router)


@app.get("/api/health", tags=["health"])
def health_check():
    return {"status": "ok", "app": APP_NAME}
