import random
import threading
from datetime import date, datetime, timedelta

import pytest

from app.core.errors import InvalidArgument
from app.progress.engine import ProgressEngine, next_streak, tally_difficulties
from app.progress.schemas import CompletedQuestion
from app.progress.store import InMemoryDailyAssignmentStore, InMemoryProgressStore, ProgressStore
from app.questions.store import InMemoryQuestionStore


DAY_1 = datetime(2026, 3, 2, 9, 30)
DAY_2 = DAY_1 + timedelta(days=1)
DAY_4 = DAY_1 + timedelta(days=3)


@pytest.fixture
def engine(question_store, assignment_store, progress_store):
    return ProgressEngine(question_store, assignment_store, progress_store, rng=random.Random(7))


class ExplodingProgressStore(ProgressStore):
    """Fails the test if the engine touches the store."""

    def get(self, user_id):
        raise AssertionError("store was read")

    def transact(self, user_id, mutate):
        raise AssertionError("store was written")

    def delete(self, user_id):
        raise AssertionError("store was written")


# ======================================================
# DAILY QUESTION
# ======================================================

def test_daily_question_is_pinned_for_the_day(engine):
    today = date(2026, 3, 2)
    first = engine.get_daily_question(today)

    assert first is not None
    for _ in range(10):
        assert engine.get_daily_question(today) == first


def test_daily_question_survives_a_different_rng(question_store, assignment_store, progress_store):
    today = date(2026, 3, 2)
    first = ProgressEngine(question_store, assignment_store, progress_store, rng=random.Random(1))
    second = ProgressEngine(question_store, assignment_store, progress_store, rng=random.Random(99))

    assert first.get_daily_question(today) == second.get_daily_question(today)


def test_daily_question_is_none_when_pool_is_empty(assignment_store, progress_store):
    engine = ProgressEngine(InMemoryQuestionStore(), assignment_store, progress_store)

    assert engine.get_daily_question(date(2026, 3, 2)) is None
    assert assignment_store.get("2026-03-02") is None


def test_daily_question_comes_from_the_pool(engine, question_store):
    pool_ids = {q.id for q in question_store.get_all()}
    picked = {engine.get_daily_question(date(2026, 3, d)).id for d in range(1, 20)}

    assert picked <= pool_ids


def test_concurrent_first_requests_agree_on_one_question(question_store):
    assignments = InMemoryDailyAssignmentStore()
    today = date(2026, 3, 2)
    barrier = threading.Barrier(8)
    results = []

    def worker(seed):
        engine = ProgressEngine(question_store, assignments, InMemoryProgressStore(), rng=random.Random(seed))
        barrier.wait()
        results.append(engine.get_daily_question(today))

    threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r == results[0] for r in results)


# ======================================================
# STREAKS
# ======================================================

def test_streak_sequence_with_a_gap(engine):
    assert engine.record_completion("u1", "q1", "Easy", DAY_1) == 1
    assert engine.record_completion("u1", "q2", "Medium", DAY_2) == 2
    # day 3 skipped
    assert engine.record_completion("u1", "q3", "Hard", DAY_4) == 1


def test_same_day_resubmission_is_a_no_op(engine):
    engine.record_completion("u1", "q1", "Easy", DAY_1)
    before = engine.get_progress("u1")

    streak = engine.record_completion("u1", "q1", "Easy", DAY_1 + timedelta(hours=5))
    after = engine.get_progress("u1")

    assert streak == before.current_streak == 1
    assert after.total_solved == before.total_solved == 1
    assert after.completed_questions == before.completed_questions


def test_second_question_same_day_keeps_streak(engine):
    engine.record_completion("u1", "q1", "Easy", DAY_1)
    streak = engine.record_completion("u1", "q2", "Medium", DAY_1 + timedelta(hours=2))

    progress = engine.get_progress("u1")
    assert streak == 1
    assert progress.total_solved == 2


def test_same_question_on_a_later_day_counts_again(engine):
    engine.record_completion("u1", "q1", "Easy", DAY_1)
    streak = engine.record_completion("u1", "q1", "Easy", DAY_2)

    assert streak == 2
    assert engine.get_progress("u1").total_solved == 2


def test_users_do_not_share_progress(engine):
    engine.record_completion("u1", "q1", "Easy", DAY_1)
    engine.record_completion("u1", "q2", "Easy", DAY_2)
    streak = engine.record_completion("u2", "q1", "Easy", DAY_2)

    assert streak == 1
    assert engine.get_progress("u2").total_solved == 1


@pytest.mark.parametrize(
    "last_active, expected",
    [
        (date(2026, 3, 1), 4),   # yesterday
        (date(2026, 3, 2), 3),   # today
        (date(2026, 2, 27), 1),  # gap
        (date(1970, 1, 1), 1),   # never active
    ],
)
def test_next_streak(last_active, expected):
    assert next_streak(3, last_active, date(2026, 3, 2)) == expected


# ======================================================
# INPUT VALIDATION
# ======================================================

@pytest.mark.parametrize(
    "user_id, question_id, difficulty",
    [
        ("", "q1", "Easy"),
        (None, "q1", "Easy"),
        ("u1", "   ", "Easy"),
        ("u1", "q1", None),
    ],
)
def test_invalid_completion_rejected_before_store_access(question_store, assignment_store, user_id, question_id, difficulty):
    engine = ProgressEngine(question_store, assignment_store, ExplodingProgressStore())

    with pytest.raises(InvalidArgument):
        engine.record_completion(user_id, question_id, difficulty, DAY_1)


def test_get_progress_requires_user_id(question_store, assignment_store):
    engine = ProgressEngine(question_store, assignment_store, ExplodingProgressStore())

    with pytest.raises(InvalidArgument):
        engine.get_progress("")


# ======================================================
# PROGRESS VIEW
# ======================================================

def test_progress_defaults_for_unknown_user(engine):
    view = engine.get_progress("nobody")

    assert view.current_streak == 0
    assert view.total_solved == 0
    assert view.completed_questions == []
    assert view.stats.model_dump() == {"hard": 0, "medium": 0, "easy": 0, "choice": 0}
    assert view.remaining == view.challenge_days == 45


def test_stats_add_up_to_total_solved(engine):
    labels = ["Easy", "MEDIUM", "hard", "Code of Choice", "medium", "Easy "]
    for offset, label in enumerate(labels):
        engine.record_completion("u1", f"q{offset}", label, DAY_1 + timedelta(days=offset))

    view = engine.get_progress("u1")
    stats = view.stats

    assert stats.easy == 2
    assert stats.medium == 2
    assert stats.hard == 1
    assert stats.choice == 1
    assert stats.hard + stats.medium + stats.easy + stats.choice == view.total_solved == 6
    assert view.remaining == 45 - 6


def test_completed_dates_are_distinct_and_sorted(engine):
    engine.record_completion("u1", "q2", "Easy", DAY_2)
    engine.record_completion("u1", "q1", "Easy", DAY_1)
    engine.record_completion("u1", "q3", "Easy", DAY_1 + timedelta(hours=3))

    assert engine.get_progress("u1").completed_dates == ["2026-03-02", "2026-03-03"]


def test_tally_treats_missing_difficulty_as_choice():
    entries = [
        CompletedQuestion(question_id="a", completed_at=DAY_1, difficulty=None),
        CompletedQuestion(question_id="b", completed_at=DAY_1, difficulty=""),
        CompletedQuestion(question_id="c", completed_at=DAY_1, difficulty="Easy"),
    ]

    stats = tally_difficulties(entries)
    assert (stats.choice, stats.easy) == (2, 1)
