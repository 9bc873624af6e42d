from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# Prior activity for a user with no record at all
EPOCH = datetime(1970, 1, 1)


class CompletedQuestion(BaseModel):
    question_id: str
    completed_at: datetime
    difficulty: Optional[str] = None


class UserProgress(BaseModel):
    user_id: str
    completed_questions: List[CompletedQuestion] = Field(default_factory=list)
    current_streak: int = 0
    last_active_date: datetime = EPOCH
    total_solved: int = 0

    def completed_on(self, question_id: str, day: date) -> bool:
        return any(
            c.question_id == question_id and c.completed_at.date() == day
            for c in self.completed_questions
        )


class DifficultyStats(BaseModel):
    hard: int = 0
    medium: int = 0
    easy: int = 0
    choice: int = 0


class ProgressView(BaseModel):
    completed_questions: List[CompletedQuestion] = Field(default_factory=list)
    current_streak: int = 0
    total_solved: int = 0
    stats: DifficultyStats = Field(default_factory=DifficultyStats)
    completed_dates: List[str] = Field(default_factory=list)
    challenge_days: int = 0
    remaining: int = 0


class CompletionIn(BaseModel):
    # Optional so the engine names the missing field in its InvalidArgument
    userId: Optional[str] = None
    questionId: Optional[str] = None
    difficulty: Optional[str] = None
