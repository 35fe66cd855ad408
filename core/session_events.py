"""
Values exchanged with the test session.

UI events flow in (FlipCard, MarkCorrect, MarkWrong); outcomes flow out
(SegmentResult, SessionSummary).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from core.schemas import compute_percentage


# ---- UI events ----

@dataclass(frozen=True)
class FlipCard:
    """Toggle between the question and answer side."""


@dataclass(frozen=True)
class MarkCorrect:
    """The user knew the answer."""


@dataclass(frozen=True)
class MarkWrong:
    """The user did not know the answer."""


UIEvent = Union[FlipCard, MarkCorrect, MarkWrong]


# ---- Outcomes ----

@dataclass(frozen=True)
class SegmentResult:
    """
    Score of one contiguous run of same-topic cards (topic-by-topic mode).
    """
    topic_id: str
    topic_title: Optional[str]
    score: int
    attempted: int

    @property
    def percentage(self) -> float:
        return compute_percentage(self.score, self.attempted)


@dataclass(frozen=True)
class SessionSummary:
    """
    Overall score of a finished session (single-topic and random modes).
    """
    score_correct: int
    cards_attempted: int

    @property
    def percentage(self) -> float:
        return compute_percentage(self.score_correct, self.cards_attempted)

    def describe(self) -> str:
        return f"Score: {self.score_correct} / {self.cards_attempted} ({self.percentage:.1f}%)"


SessionOutcome = Union[SegmentResult, SessionSummary]
