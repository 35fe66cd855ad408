import pytest

from core.schemas import TestMode
from core.session_events import (
    FlipCard,
    MarkCorrect,
    MarkWrong,
    SegmentResult,
    SessionSummary,
)
from core.study_session import TestSession


def _answer(session: TestSession, correct: bool) -> None:
    session.flip()
    if correct:
        assert session.mark_correct()
    else:
        assert session.mark_wrong()


def _snapshot(session: TestSession) -> tuple:
    return (
        session.cursor,
        session.front_visible,
        session.finished,
        session.overall_score,
        session.overall_attempted,
        session.active_segment,
    )


# ---- Initialization ----

@pytest.mark.parametrize("mode", list(TestMode))
def test_empty_queue_finishes_immediately(mode):
    session = TestSession.start([], mode)

    assert session.finished
    assert session.overall_attempted == 0
    assert session.progress_label() == "0/0"

    events = session.drain_events()
    if mode == TestMode.SEQUENTIAL_BY_TOPIC:
        assert events == []
    else:
        assert events == [SessionSummary(score_correct=0, cards_attempted=0)]
        assert events[0].percentage == 0.0


def test_start_shows_first_card_front(card_factory):
    cards = [card_factory("c1"), card_factory("c2")]
    session = TestSession.start(cards, TestMode.SPECIFIC_TOPIC, {"topic-a": "Cells"})

    assert session.cursor == 0
    assert session.front_visible
    assert not session.finished
    assert session.current_card.id == "c1"
    assert session.current_topic_title == "Cells"
    assert session.progress_label() == "Card 1 of 2"


def test_unknown_topic_title_fallback(card_factory):
    session = TestSession.start([card_factory("c1", topic_id="missing")], TestMode.SPECIFIC_TOPIC)
    assert session.current_topic_title == "Unknown Topic"


# ---- Specific topic / random ----

def test_specific_topic_scenario(card_factory):
    cards = [card_factory("c1"), card_factory("c2"), card_factory("c3")]
    session = TestSession.start(cards, TestMode.SPECIFIC_TOPIC)

    _answer(session, correct=True)
    _answer(session, correct=True)
    assert not session.finished
    _answer(session, correct=False)

    assert session.finished
    assert session.incorrect_count == 1
    assert session.progress_label() == "Completed: 3 / 3"

    events = session.drain_events()
    assert events == [SessionSummary(score_correct=2, cards_attempted=3)]
    assert events[0].percentage == pytest.approx(66.666, abs=0.01)
    assert events[0].describe() == "Score: 2 / 3 (66.7%)"

    before = _snapshot(session)
    session.advance()
    assert _snapshot(session) == before
    assert session.drain_events() == []


def test_random_mode_emits_single_summary(card_factory):
    cards = [card_factory("c1", "a"), card_factory("c2", "b")]
    session = TestSession.start(cards, TestMode.RANDOM_ALL_SUBJECT)

    _answer(session, correct=False)
    assert session.drain_events() == []
    _answer(session, correct=True)

    assert session.drain_events() == [SessionSummary(score_correct=1, cards_attempted=2)]


def test_queue_order_is_kept(card_factory):
    cards = [card_factory(f"c{i}") for i in range(5)]
    session = TestSession.start(cards, TestMode.RANDOM_ALL_SUBJECT)

    seen = []
    while not session.finished:
        seen.append(session.current_card.id)
        _answer(session, correct=True)

    assert seen == ["c0", "c1", "c2", "c3", "c4"]


# ---- Gating ----

def test_mark_while_front_visible_is_ignored(card_factory):
    session = TestSession.start([card_factory("c1"), card_factory("c2")], TestMode.SPECIFIC_TOPIC)
    before = _snapshot(session)

    assert not session.mark_correct()
    assert not session.mark_wrong()

    assert _snapshot(session) == before
    assert session.drain_events() == []


def test_marks_and_flip_after_finish_are_ignored(card_factory):
    session = TestSession.start([card_factory("c1")], TestMode.SPECIFIC_TOPIC)
    _answer(session, correct=True)
    session.drain_events()
    before = _snapshot(session)

    session.flip()
    assert not session.mark_correct()
    assert not session.dispatch(FlipCard())

    assert _snapshot(session) == before
    assert session.drain_events() == []
    assert session.current_card is None


def test_flip_toggles_without_scoring(card_factory):
    session = TestSession.start([card_factory("c1")], TestMode.SPECIFIC_TOPIC)

    session.flip()
    assert not session.front_visible
    session.flip()
    assert session.front_visible
    assert session.overall_attempted == 0


def test_next_card_starts_on_front(card_factory):
    session = TestSession.start([card_factory("c1"), card_factory("c2")], TestMode.SPECIFIC_TOPIC)
    _answer(session, correct=True)
    assert session.front_visible
    assert session.current_card.id == "c2"


def test_dispatch_routes_events(card_factory):
    session = TestSession.start([card_factory("c1"), card_factory("c2")], TestMode.SPECIFIC_TOPIC)

    assert not session.dispatch(MarkCorrect())
    assert session.dispatch(FlipCard())
    assert session.dispatch(MarkWrong())
    assert session.dispatch(FlipCard())
    assert session.dispatch(MarkCorrect())

    assert session.finished
    assert session.drain_events() == [SessionSummary(score_correct=1, cards_attempted=2)]


def test_dispatch_rejects_unknown_event(card_factory):
    session = TestSession.start([card_factory("c1")], TestMode.SPECIFIC_TOPIC)
    with pytest.raises(TypeError):
        session.dispatch("flip")


def test_counts_stay_bounded(card_factory):
    cards = [card_factory(f"c{i}") for i in range(4)]
    session = TestSession.start(cards, TestMode.SPECIFIC_TOPIC)

    for step in range(20):
        if step % 3 == 0:
            session.flip()
        elif step % 3 == 1:
            session.mark_correct()
        else:
            session.mark_wrong()
        assert session.overall_attempted <= len(cards)
        assert session.overall_score <= session.overall_attempted


# ---- Topic by topic ----

def test_sequential_scenario(card_factory):
    cards = [
        card_factory("q1", "topic-a"),
        card_factory("q2", "topic-a"),
        card_factory("q3", "topic-b"),
    ]
    titles = {"topic-a": "Cells", "topic-b": "Genetics"}
    session = TestSession.start(cards, TestMode.SEQUENTIAL_BY_TOPIC, titles)

    _answer(session, correct=False)
    _answer(session, correct=True)
    # Boundary A -> B reached when q3 became current
    assert session.drain_events() == [SegmentResult("topic-a", "Cells", score=1, attempted=2)]

    _answer(session, correct=True)
    assert session.finished
    assert session.drain_events() == [SegmentResult("topic-b", "Genetics", score=1, attempted=1)]

    session.advance()
    assert session.drain_events() == []


def test_non_contiguous_runs_are_separate_segments(card_factory):
    topics = ["a", "a", "b", "a"]
    cards = [card_factory(f"c{i}", t) for i, t in enumerate(topics)]
    session = TestSession.start(cards, TestMode.SEQUENTIAL_BY_TOPIC)

    for _ in cards:
        _answer(session, correct=True)

    events = session.drain_events()
    assert [e.topic_id for e in events] == ["a", "b", "a"]
    assert [e.attempted for e in events] == [2, 1, 1]
    assert all(isinstance(e, SegmentResult) for e in events)


def test_sequential_emits_no_summary(card_factory):
    session = TestSession.start([card_factory("c1", "a")], TestMode.SEQUENTIAL_BY_TOPIC)
    _answer(session, correct=True)

    events = session.drain_events()
    assert not any(isinstance(e, SessionSummary) for e in events)


def test_abandoned_segment_is_not_reported(card_factory):
    cards = [card_factory("c1", "a"), card_factory("c2", "b"), card_factory("c3", "b")]
    session = TestSession.start(cards, TestMode.SEQUENTIAL_BY_TOPIC)

    _answer(session, correct=True)
    assert len(session.drain_events()) == 1

    # User leaves while topic b has no marks; nothing else is emitted
    assert session.active_segment.topic_id == "b"
    assert session.active_segment.attempted == 0
    assert session.drain_events() == []


def test_segment_percentage():
    segment = SegmentResult("a", "Cells", score=3, attempted=4)
    assert segment.percentage == 75.0
    assert SegmentResult("a", None, score=0, attempted=0).percentage == 0.0
