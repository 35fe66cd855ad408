"""
State machine for one test-taking session.

The session walks an already ordered queue of flashcards. Each card is shown
question side first; it can only be marked after it has been flipped. In
topic-by-topic mode the queue is split into segments (maximal contiguous
runs of same-topic cards) and each segment with at least one marked card
produces exactly one SegmentResult. Other modes produce one SessionSummary
when the session finishes.

All operations are synchronous and must be called serially.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from core.schemas import Flashcard, TestMode
from core.session_events import (
    FlipCard,
    MarkCorrect,
    MarkWrong,
    SegmentResult,
    SessionOutcome,
    SessionSummary,
    UIEvent,
)

logger = logging.getLogger(__name__)

UNKNOWN_TOPIC_TITLE = "Unknown Topic"


@dataclass
class ActiveSegment:
    """Running score of the current same-topic run."""
    topic_id: str
    topic_title: Optional[str]
    score: int = 0
    attempted: int = 0

    def to_result(self) -> SegmentResult:
        return SegmentResult(
            topic_id=self.topic_id,
            topic_title=self.topic_title,
            score=self.score,
            attempted=self.attempted,
        )


class TestSession:
    """
    One in-memory test run over a fixed queue of flashcards.

    Outcomes are appended to an outbox as they happen; callers collect them
    with drain_events() and hand them to the result recorder.
    """
    __test__ = False  # not a pytest class

    def __init__(
        self,
        queue: Sequence[Flashcard],
        mode: TestMode,
        topic_titles: Optional[Mapping[str, str]] = None
    ):
        self.queue: list[Flashcard] = list(queue)
        self.mode = TestMode(mode)
        self.topic_titles: dict[str, str] = dict(topic_titles or {})

        self.cursor = -1
        self.front_visible = True
        self.finished = False
        self.overall_score = 0
        self.overall_attempted = 0
        self.active_segment: Optional[ActiveSegment] = None

        self._outbox: list[SessionOutcome] = []

        if not self.queue:
            logger.info("Session started with no cards (%s)", self.mode.value)
            self._finish()

    @classmethod
    def start(
        cls,
        queue: Sequence[Flashcard],
        mode: TestMode,
        topic_titles: Optional[Mapping[str, str]] = None
    ) -> "TestSession":
        """Initialize a session and move to its first card."""
        session = cls(queue, mode, topic_titles)
        session.advance()
        return session

    # ---- Transitions ----

    def advance(self) -> None:
        """
        Move to the next card, or finish when every card has been marked.

        A no-op once the session is finished.
        """
        if self.finished:
            return

        if self.overall_attempted >= len(self.queue):
            self._finish()
            return

        self.cursor += 1
        if self.cursor >= len(self.queue):
            self._finish()
            return

        self.front_visible = True
        if self.mode == TestMode.SEQUENTIAL_BY_TOPIC:
            self._enter_topic(self.queue[self.cursor].topic_id)

    def flip(self) -> None:
        if self.finished:
            return
        self.front_visible = not self.front_visible

    def mark_correct(self) -> bool:
        """
        Record a correct answer for the current card and advance.

        Returns:
            False if the mark was ignored (answer hidden or session finished)
        """
        return self._mark(correct=True)

    def mark_wrong(self) -> bool:
        """
        Record a wrong answer for the current card and advance.

        Returns:
            False if the mark was ignored (answer hidden or session finished)
        """
        return self._mark(correct=False)

    def dispatch(self, event: UIEvent) -> bool:
        """
        Apply one UI event.

        Returns:
            True if the event changed the session
        """
        if isinstance(event, FlipCard):
            if self.finished:
                return False
            self.flip()
            return True
        if isinstance(event, MarkCorrect):
            return self.mark_correct()
        if isinstance(event, MarkWrong):
            return self.mark_wrong()
        raise TypeError(f"Unknown session event: {event!r}")

    def drain_events(self) -> list[SessionOutcome]:
        """Return and clear the outcomes emitted since the last drain."""
        events, self._outbox = self._outbox, []
        return events

    # ---- Read-only helpers ----

    @property
    def current_card(self) -> Optional[Flashcard]:
        if self.finished or not 0 <= self.cursor < len(self.queue):
            return None
        return self.queue[self.cursor]

    @property
    def current_topic_title(self) -> str:
        card = self.current_card
        if card is None:
            return UNKNOWN_TOPIC_TITLE
        return self.topic_titles.get(card.topic_id) or UNKNOWN_TOPIC_TITLE

    @property
    def incorrect_count(self) -> int:
        return self.overall_attempted - self.overall_score

    def progress_label(self) -> str:
        total = len(self.queue)
        if total == 0:
            return "0/0"
        if self.finished:
            return f"Completed: {self.overall_attempted} / {total}"
        return f"Card {self.cursor + 1} of {total}"

    # ---- Internals ----

    def _mark(self, correct: bool) -> bool:
        if self.finished or self.front_visible or not 0 <= self.cursor < len(self.queue):
            logger.warning(
                "Ignored %s mark (finished=%s, front_visible=%s, cursor=%d)",
                "correct" if correct else "wrong",
                self.finished, self.front_visible, self.cursor,
            )
            return False

        self.overall_attempted += 1
        if correct:
            self.overall_score += 1
        if self.active_segment is not None:
            self.active_segment.attempted += 1
            if correct:
                self.active_segment.score += 1

        self.advance()
        return True

    def _enter_topic(self, topic_id: str) -> None:
        segment = self.active_segment
        if segment is not None and segment.topic_id == topic_id:
            return
        if segment is not None:
            self._flush_segment()
        self.active_segment = ActiveSegment(
            topic_id=topic_id,
            topic_title=self.topic_titles.get(topic_id),
        )

    def _flush_segment(self) -> None:
        segment = self.active_segment
        self.active_segment = None
        if segment is None or segment.attempted == 0:
            return
        logger.info(
            "Segment finished for topic %s: %d/%d",
            segment.topic_id, segment.score, segment.attempted,
        )
        self._outbox.append(segment.to_result())

    def _finish(self) -> None:
        self.finished = True
        if self.mode == TestMode.SEQUENTIAL_BY_TOPIC:
            self._flush_segment()
            return
        summary = SessionSummary(
            score_correct=self.overall_score,
            cards_attempted=self.overall_attempted,
        )
        logger.info("Session finished (%s): %s", self.mode.value, summary.describe())
        self._outbox.append(summary)
