import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from core import content_repo, store
from core.errors import NotAuthenticatedError, NotFoundError, ValidationError


def _subject_doc(database, subject_id):
    return database["subjects"].find_one({"_id": ObjectId(subject_id)})


def _topic_doc(database, topic_id):
    return database["topics"].find_one({"_id": ObjectId(topic_id)})


class _FailingUpdates:
    """Collection proxy whose update_one always fails."""

    def __init__(self, collection):
        self._collection = collection

    def update_one(self, *args, **kwargs):
        raise OperationFailure("write rejected")

    def __getattr__(self, name):
        return getattr(self._collection, name)


# ---- Subjects ----

def test_create_subject_defaults(database, user_id):
    subject = content_repo.create_subject(user_id, "  Biology ")

    doc = _subject_doc(database, subject.id)
    assert doc["title"] == "Biology"
    assert doc["userId"] == user_id
    assert doc["topicCount"] == 0
    assert doc["revisionProgress"] == 0
    assert doc["streakCount"] == 0
    assert doc["previousResult"] == "N/A"
    assert doc["studyTime"] == "0 hrs"
    assert doc["flashcardsCompleted"] == 0
    assert doc["flashcardsTotal"] == 0
    assert doc["cardColorHex"] == ""


def test_create_subject_requires_title_and_user(user_id):
    with pytest.raises(ValidationError):
        content_repo.create_subject(user_id, "   ")
    with pytest.raises(NotAuthenticatedError):
        content_repo.create_subject(None, "Biology")


def test_list_subjects_by_title_and_owner(user_id):
    content_repo.create_subject(user_id, "Physics")
    content_repo.create_subject(user_id, "Biology")
    content_repo.create_subject("other-user", "Art")

    assert [s.title for s in content_repo.list_subjects(user_id)] == ["Biology", "Physics"]


def test_subject_of_another_user_is_not_found(user_id):
    subject = content_repo.create_subject("other-user", "Art")
    with pytest.raises(NotFoundError):
        content_repo.get_subject(user_id, subject.id)
    with pytest.raises(NotFoundError):
        content_repo.create_topic(user_id, subject.id, "Painting")


def test_invalid_id_is_not_found(user_id):
    with pytest.raises(NotFoundError):
        content_repo.get_subject(user_id, "not-an-object-id")


def test_rename_subject(user_id):
    subject = content_repo.create_subject(user_id, "Bio")
    content_repo.rename_subject(user_id, subject.id, "Biology")
    assert content_repo.get_subject(user_id, subject.id).title == "Biology"


# ---- Counters ----

def test_topic_count_follows_create_and_delete(database, user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    cells = content_repo.create_topic(user_id, subject.id, "Cells")
    content_repo.create_topic(user_id, subject.id, "Genetics")
    assert _subject_doc(database, subject.id)["topicCount"] == 2

    content_repo.delete_topic(user_id, cells.id)
    assert _subject_doc(database, subject.id)["topicCount"] == 1


def test_flashcard_count_follows_create_and_delete(database, user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")
    first = content_repo.create_flashcard(user_id, topic.id, "Q1", "A1")
    content_repo.create_flashcard(user_id, topic.id, "Q2", "A2")
    assert _topic_doc(database, topic.id)["flashcardCount"] == 2

    content_repo.delete_flashcard(user_id, first.id)
    assert _topic_doc(database, topic.id)["flashcardCount"] == 1
    assert [c.question for c in content_repo.list_flashcards(topic.id)] == ["Q2"]


def test_flashcard_inherits_subject_from_topic(user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")
    card = content_repo.create_flashcard(user_id, topic.id, "Q", "A")

    assert card.subject_id == subject.id
    assert content_repo.has_flashcards(subject.id)


def test_subject_flashcard_count_spans_topics(user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    other = content_repo.create_subject(user_id, "History")
    cells = content_repo.create_topic(user_id, subject.id, "Cells")
    genetics = content_repo.create_topic(user_id, subject.id, "Genetics")
    content_repo.create_flashcard(user_id, cells.id, "Q1", "A1")
    second = content_repo.create_flashcard(user_id, genetics.id, "Q2", "A2")
    content_repo.create_flashcard(user_id, content_repo.create_topic(user_id, other.id, "Rome").id, "Q3", "A3")

    assert content_repo.count_subject_flashcards(subject.id) == 2

    content_repo.delete_flashcard(user_id, second.id)
    assert content_repo.count_subject_flashcards(subject.id) == 1


def test_flashcard_requires_question_and_answer(user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")
    with pytest.raises(ValidationError):
        content_repo.create_flashcard(user_id, topic.id, "Q", " ")
    with pytest.raises(ValidationError):
        content_repo.create_flashcard(user_id, topic.id, "", "A")


def test_failed_counter_update_keeps_primary_write(database, user_id, monkeypatch, caplog):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")

    real_get_collection = store.get_collection

    def get_collection(name):
        collection = real_get_collection(name)
        if name == store.TOPICS:
            return _FailingUpdates(collection)
        return collection

    monkeypatch.setattr(store, "get_collection", get_collection)

    card = content_repo.create_flashcard(user_id, topic.id, "Q", "A")

    assert card.id is not None
    assert database["flashcards"].count_documents({}) == 1
    assert _topic_doc(database, topic.id)["flashcardCount"] == 0
    assert "Counter drift" in caplog.text


def test_reconcile_counters_repairs_drift(database, user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")
    content_repo.create_flashcard(user_id, topic.id, "Q1", "A1")
    content_repo.create_flashcard(user_id, topic.id, "Q2", "A2")

    database["subjects"].update_one({}, {"$set": {"topicCount": 5}})
    database["topics"].update_one({}, {"$set": {"flashcardCount": 0}})

    assert content_repo.reconcile_counters(user_id) == 2
    assert _subject_doc(database, subject.id)["topicCount"] == 1
    assert _topic_doc(database, topic.id)["flashcardCount"] == 2
    assert content_repo.reconcile_counters(user_id) == 0


# ---- Cascades and moves ----

def test_delete_topic_removes_its_flashcards(database, user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    cells = content_repo.create_topic(user_id, subject.id, "Cells")
    genetics = content_repo.create_topic(user_id, subject.id, "Genetics")
    content_repo.create_flashcard(user_id, cells.id, "Q1", "A1")
    content_repo.create_flashcard(user_id, genetics.id, "Q2", "A2")

    assert content_repo.delete_topic(user_id, cells.id) == 1
    assert database["flashcards"].count_documents({"topicId": cells.id}) == 0
    assert database["flashcards"].count_documents({"topicId": genetics.id}) == 1


def test_delete_subject_cascades(database, user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    keep = content_repo.create_subject(user_id, "Physics")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")
    content_repo.create_flashcard(user_id, topic.id, "Q", "A")
    content_repo.create_topic(user_id, keep.id, "Motion")

    assert content_repo.delete_subject(user_id, subject.id) == 1
    assert [s.title for s in content_repo.list_subjects(user_id)] == ["Physics"]
    assert database["topics"].count_documents({}) == 1
    assert database["flashcards"].count_documents({}) == 0


def test_move_topic_between_subjects(database, user_id):
    biology = content_repo.create_subject(user_id, "Biology")
    chemistry = content_repo.create_subject(user_id, "Chemistry")
    topic = content_repo.create_topic(user_id, biology.id, "Molecules")
    content_repo.create_flashcard(user_id, topic.id, "Q", "A")

    moved = content_repo.update_topic(user_id, topic.id, "Organic molecules", chemistry.id)

    assert moved.subject_id == chemistry.id
    assert moved.title == "Organic molecules"
    assert _subject_doc(database, biology.id)["topicCount"] == 0
    assert _subject_doc(database, chemistry.id)["topicCount"] == 1
    assert content_repo.list_subject_flashcards(chemistry.id)[0].topic_id == topic.id
    assert not content_repo.has_flashcards(biology.id)


def test_rename_topic_keeps_counters(database, user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cell")

    content_repo.update_topic(user_id, topic.id, "Cells")

    assert content_repo.get_topic(topic.id).title == "Cells"
    assert _subject_doc(database, subject.id)["topicCount"] == 1


def test_update_flashcard(user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    topic = content_repo.create_topic(user_id, subject.id, "Cells")
    card = content_repo.create_flashcard(user_id, topic.id, "Q", "A")

    content_repo.update_flashcard(user_id, card.id, "New Q", "New A")

    stored = content_repo.get_flashcard(card.id)
    assert (stored.question, stored.answer) == ("New Q", "New A")


# ---- Ordering and defaults ----

def test_topics_listed_in_creation_order(user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    for title in ["Zoology", "Anatomy", "Cells"]:
        content_repo.create_topic(user_id, subject.id, title)

    assert [t.title for t in content_repo.list_topics(subject.id)] == ["Zoology", "Anatomy", "Cells"]


def test_pick_default(user_id):
    subject = content_repo.create_subject(user_id, "Biology")
    first = content_repo.create_topic(user_id, subject.id, "Cells")
    second = content_repo.create_topic(user_id, subject.id, "Genetics")
    topics = content_repo.list_topics(subject.id)

    assert content_repo.pick_default(topics, second.id).id == second.id
    assert content_repo.pick_default(topics, "missing").id == first.id
    assert content_repo.pick_default(topics, None).id == first.id
    assert content_repo.pick_default([], "anything") is None
