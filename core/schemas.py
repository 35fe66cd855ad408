"""
Pydantic models for the StudySpot document store.

These models define the structure of MongoDB documents. Python attribute
names are snake_case; the stored field names (camelCase) are the aliases.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class TestMode(str, Enum):
    """How flashcards are selected and ordered for a test session."""
    __test__ = False  # not a pytest class

    SPECIFIC_TOPIC = "SPECIFIC_TOPIC"
    RANDOM_ALL_SUBJECT = "RANDOM_ALL_SUBJECT_FLASHCARDS"
    SEQUENTIAL_BY_TOPIC = "TOPIC_BY_TOPIC_SEQUENTIAL"


TEST_MODE_LABELS: dict[TestMode, str] = {
    TestMode.SPECIFIC_TOPIC: "Specific topic",
    TestMode.RANDOM_ALL_SUBJECT: "Whole subject (random)",
    TestMode.SEQUENTIAL_BY_TOPIC: "Topic by topic",
}


def compute_percentage(score_correct: int, cards_attempted: int) -> float:
    """
    Percentage of correct answers, 0.0 when nothing was attempted.
    """
    if cards_attempted <= 0:
        return 0.0
    return score_correct / cards_attempted * 100.0


class StoredDocument(BaseModel):
    """
    Base for models persisted as MongoDB documents.
    """
    id: Optional[str] = Field(default=None, alias="_id")

    class Config:
        populate_by_name = True
        use_enum_values = True  # Store enum values as strings in MongoDB

    @classmethod
    def from_document(cls, doc: dict[str, Any]):
        """Build a model from a raw document, stringifying the ObjectId."""
        data = dict(doc)
        if data.get("_id") is not None:
            data["_id"] = str(data["_id"])
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Serialize to a document for insertion (the id is server-assigned)."""
        return self.model_dump(by_alias=True, exclude={"id"})


# ---- Content ----

class Subject(StoredDocument):
    """A top-level study category owned by one user."""
    user_id: str = Field(..., alias="userId")
    title: str
    topic_count: int = Field(default=0, alias="topicCount")
    revision_progress: int = Field(default=0, alias="revisionProgress")
    streak_count: int = Field(default=0, alias="streakCount")

    # Display metrics
    previous_result: str = Field(default="N/A", alias="previousResult")
    study_time: str = Field(default="0 hrs", alias="studyTime")
    flashcards_completed: int = Field(default=0, alias="flashcardsCompleted")
    flashcards_total: int = Field(default=0, alias="flashcardsTotal")
    card_color_hex: str = Field(default="", alias="cardColorHex")


class Topic(StoredDocument):
    """A sub-category of a subject containing flashcards."""
    subject_id: str = Field(..., alias="subjectId")
    title: str
    flashcard_count: int = Field(default=0, alias="flashcardCount")
    timestamp: Optional[datetime] = None


class Flashcard(StoredDocument):
    """One question/answer study unit, owned by exactly one topic."""
    topic_id: str = Field(..., alias="topicId")
    subject_id: str = Field(..., alias="subjectId")
    question: str
    answer: str
    timestamp: Optional[datetime] = None


# ---- Results ----

class TestResult(StoredDocument):
    """
    Outcome of a completed session or sequential segment.

    Write-once: percentage is always derived from the two counts.
    """
    __test__ = False  # not a pytest class

    user_id: str = Field(..., alias="userId")
    subject_id: str = Field(..., alias="subjectId")
    subject_title: str = Field(..., alias="subjectTitle")
    topic_id: Optional[str] = Field(default=None, alias="topicId")
    topic_title: str = Field(..., alias="topicTitle")
    score_correct: int = Field(..., ge=0, alias="scoreCorrect")
    cards_attempted: int = Field(..., ge=0, alias="cardsAttempted")
    percentage: float = 0.0
    test_mode: TestMode = Field(..., alias="testMode")
    timestamp: Optional[datetime] = None

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _derive_percentage(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            score = data.get("scoreCorrect", data.get("score_correct", 0))
            attempted = data.get("cardsAttempted", data.get("cards_attempted", 0))
            data["percentage"] = compute_percentage(score, attempted)
        return data


# ---- Users ----

class UserProfile(StoredDocument):
    """Profile document keyed by the user id."""
    display_name: str = Field(..., alias="displayName")
    email: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


# ---- Generation ----

class GeneratedFlashcard(BaseModel):
    """A question/answer pair parsed from a generative-text response."""
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
