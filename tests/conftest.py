import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports app.db.base.
_TMP_DIR = tempfile.mkdtemp(prefix="codestreak-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.progress.store import InMemoryDailyAssignmentStore, InMemoryProgressStore  # noqa: E402
from app.questions.schemas import Question  # noqa: E402
from app.questions.store import InMemoryQuestionStore  # noqa: E402

# Register every table on Base.metadata
from app.admin.models import AdminAccount  # noqa: E402,F401
from app.progress.models import UserProgressRecord  # noqa: E402,F401
from app.questions.models import QuestionRecord  # noqa: E402,F401
from app.users.models import UserProfile  # noqa: E402,F401


SAMPLE_QUESTIONS = [
    Question(id="q1", title="Two Sum", description="Return indices of the two numbers adding up to target.",
             difficulty="Easy", category="Array", tags=["Array", "Hash Table"]),
    Question(id="q2", title="Add Two Numbers", description="Add two numbers stored as reversed linked lists.",
             difficulty="Medium", category="Linked List", tags=["Linked List", "Math"]),
    Question(id="q3", title="Median of Two Sorted Arrays", description="Find the median of two sorted arrays.",
             difficulty="Hard", category="Array"),
]


@pytest.fixture
def question_store():
    return InMemoryQuestionStore(SAMPLE_QUESTIONS)


@pytest.fixture
def assignment_store():
    return InMemoryDailyAssignmentStore()


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def session_factory():
    """Sessions on a private in-memory SQLite database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def sample_questions():
    return [q.model_copy(deep=True) for q in SAMPLE_QUESTIONS]
