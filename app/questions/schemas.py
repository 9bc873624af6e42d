from typing import List, Optional

from pydantic import BaseModel

# Ids carrying this prefix belong to imported questions that have not been
# persisted yet; saving them allocates a storage id instead of overwriting.
PLACEHOLDER_PREFIX = "q_new_"


class Question(BaseModel):
    id: Optional[str] = None
    title: str
    description: str
    difficulty: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    example: Optional[str] = None
    constraints: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return not self.id or self.id.startswith(PLACEHOLDER_PREFIX)

    def to_public(self) -> dict:
        """Wire form: fields that were never set are left out."""
        return self.model_dump(exclude_none=True)


class QuestionBatch(BaseModel):
    questions: Optional[List[Question]] = None
