import mongomock
import pytest

from core import store
from core.schemas import Flashcard


@pytest.fixture(autouse=True)
def database():
    """Fresh in-memory database for every test."""
    client = mongomock.MongoClient()
    db = client["test_studyspot"]
    store.use_database(db)
    yield db
    store.use_database(None)


@pytest.fixture
def user_id():
    return "user-1"


def make_card(card_id: str, topic_id: str = "topic-a", subject_id: str = "subject-1") -> Flashcard:
    return Flashcard(
        id=card_id,
        topic_id=topic_id,
        subject_id=subject_id,
        question=f"Question {card_id}",
        answer=f"Answer {card_id}",
    )


@pytest.fixture
def card_factory():
    return make_card
