"""
MongoDB repository for subjects, topics and flashcards.

Topic.flashcardCount and Subject.topicCount are denormalized counters. They
are only ever changed with atomic ``$inc`` updates issued after the owning
create/delete succeeded. A failed counter update is logged and accepted as
drift; ``reconcile_counters`` repairs it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, TypeVar

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from core import store
from core.errors import NotFoundError, ValidationError
from core.schemas import Flashcard, StoredDocument, Subject, Topic
from core.users_repo import require_user_id

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=StoredDocument)


# ---- Helpers ----

def _object_id(doc_id: Optional[str]) -> ObjectId:
    if not doc_id or not ObjectId.is_valid(doc_id):
        raise NotFoundError()
    return ObjectId(doc_id)


def _require_text(value: Optional[str], message: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def _bump_counter(collection_name: str, doc_id: str, field: str, delta: int) -> bool:
    """
    Atomically add delta to a counter field.

    Failures are logged, never raised: the primary write already succeeded.

    Returns:
        True if the update was applied
    """
    try:
        store.get_collection(collection_name).update_one(
            {"_id": ObjectId(doc_id)},
            {"$inc": {field: delta}},
        )
    except PyMongoError:
        logger.error(
            "Counter drift: failed to apply %+d to %s.%s for %s",
            delta, collection_name, field, doc_id,
            exc_info=True,
        )
        return False
    logger.info("Applied %+d to %s.%s for %s", delta, collection_name, field, doc_id)
    return True


def pick_default(items: Sequence[T], wanted_id: Optional[str]) -> Optional[T]:
    """
    Return the item with the wanted id, else the first item in list order.
    """
    for item in items:
        if item.id == wanted_id:
            return item
    return items[0] if items else None


# ---- Subjects ----

def create_subject(user_id: str, title: str) -> Subject:
    user_id = require_user_id(user_id)
    subject = Subject(user_id=user_id, title=_require_text(title, "Subject title is required."))
    with store.remote_operation("save the subject"):
        result = store.get_collection(store.SUBJECTS).insert_one(subject.to_document())
    logger.info("Created subject %s for user %s", result.inserted_id, user_id)
    return subject.model_copy(update={"id": str(result.inserted_id)})


def list_subjects(user_id: str) -> list[Subject]:
    """
    All subjects owned by the user, ordered by title.
    """
    user_id = require_user_id(user_id)
    with store.remote_operation("load subjects"):
        docs = list(
            store.get_collection(store.SUBJECTS)
            .find({"userId": user_id})
            .sort("title", ASCENDING)
        )
    return [Subject.from_document(doc) for doc in docs]


def get_subject(user_id: str, subject_id: str) -> Subject:
    """
    Load a subject, enforcing ownership.

    Raises:
        NotFoundError: If the subject does not exist or belongs to someone else
    """
    user_id = require_user_id(user_id)
    with store.remote_operation("load the subject"):
        doc = store.get_collection(store.SUBJECTS).find_one(
            {"_id": _object_id(subject_id), "userId": user_id}
        )
    if doc is None:
        raise NotFoundError("That subject no longer exists.")
    return Subject.from_document(doc)


def rename_subject(user_id: str, subject_id: str, title: str) -> None:
    user_id = require_user_id(user_id)
    title = _require_text(title, "Subject title is required.")
    with store.remote_operation("update the subject"):
        result = store.get_collection(store.SUBJECTS).update_one(
            {"_id": _object_id(subject_id), "userId": user_id},
            {"$set": {"title": title}},
        )
    if result.matched_count == 0:
        raise NotFoundError("That subject no longer exists.")


def delete_subject(user_id: str, subject_id: str) -> int:
    """
    Delete a subject together with its topics and their flashcards.

    Returns:
        Number of topics deleted
    """
    subject = get_subject(user_id, subject_id)
    with store.remote_operation("delete the subject"):
        store.get_collection(store.FLASHCARDS).delete_many({"subjectId": subject.id})
        topics_deleted = store.get_collection(store.TOPICS).delete_many(
            {"subjectId": subject.id}
        ).deleted_count
        store.get_collection(store.SUBJECTS).delete_one({"_id": _object_id(subject.id)})
    logger.info("Deleted subject %s (%d topics)", subject.id, topics_deleted)
    return topics_deleted


# ---- Topics ----

def create_topic(user_id: str, subject_id: str, title: str) -> Topic:
    subject = get_subject(user_id, subject_id)
    topic = Topic(
        subject_id=subject.id,
        title=_require_text(title, "Topic title is required."),
        timestamp=store.server_timestamp(),
    )
    with store.remote_operation("save the topic"):
        result = store.get_collection(store.TOPICS).insert_one(topic.to_document())
    topic_id = str(result.inserted_id)
    logger.info("Created topic %s under subject %s", topic_id, subject.id)
    _bump_counter(store.SUBJECTS, subject.id, "topicCount", 1)
    return topic.model_copy(update={"id": topic_id})


def list_topics(subject_id: str) -> list[Topic]:
    """
    Topics of a subject in creation order.
    """
    with store.remote_operation("load topics"):
        docs = list(
            store.get_collection(store.TOPICS)
            .find({"subjectId": subject_id})
            .sort(store.CREATION_ORDER)
        )
    return [Topic.from_document(doc) for doc in docs]


def get_topic(topic_id: str) -> Topic:
    with store.remote_operation("load the topic"):
        doc = store.get_collection(store.TOPICS).find_one({"_id": _object_id(topic_id)})
    if doc is None:
        raise NotFoundError("That topic no longer exists.")
    return Topic.from_document(doc)


def get_owned_topic(user_id: str, topic_id: str) -> Topic:
    """Load a topic and check that its subject belongs to the user."""
    topic = get_topic(topic_id)
    get_subject(user_id, topic.subject_id)
    return topic


def update_topic(
    user_id: str,
    topic_id: str,
    title: str,
    subject_id: Optional[str] = None
) -> Topic:
    """
    Rename a topic and optionally move it to another subject.

    Moving carries the topic's flashcards along and shifts one unit of
    topicCount from the old subject to the new one.
    """
    topic = get_owned_topic(user_id, topic_id)
    title = _require_text(title, "Topic title is required.")
    new_subject_id = subject_id or topic.subject_id
    moved = new_subject_id != topic.subject_id
    if moved:
        get_subject(user_id, new_subject_id)

    with store.remote_operation("update the topic"):
        store.get_collection(store.TOPICS).update_one(
            {"_id": _object_id(topic.id)},
            {"$set": {"title": title, "subjectId": new_subject_id}},
        )
        if moved:
            store.get_collection(store.FLASHCARDS).update_many(
                {"topicId": topic.id},
                {"$set": {"subjectId": new_subject_id}},
            )

    if moved:
        logger.info("Moved topic %s from %s to %s", topic.id, topic.subject_id, new_subject_id)
        _bump_counter(store.SUBJECTS, topic.subject_id, "topicCount", -1)
        _bump_counter(store.SUBJECTS, new_subject_id, "topicCount", 1)

    return topic.model_copy(update={"title": title, "subject_id": new_subject_id})


def delete_topic(user_id: str, topic_id: str) -> int:
    """
    Delete a topic and its flashcards.

    Returns:
        Number of flashcards deleted
    """
    topic = get_owned_topic(user_id, topic_id)
    with store.remote_operation("delete the topic"):
        cards_deleted = store.get_collection(store.FLASHCARDS).delete_many(
            {"topicId": topic.id}
        ).deleted_count
        store.get_collection(store.TOPICS).delete_one({"_id": _object_id(topic.id)})
    logger.info("Deleted topic %s (%d flashcards)", topic.id, cards_deleted)
    _bump_counter(store.SUBJECTS, topic.subject_id, "topicCount", -1)
    return cards_deleted


# ---- Flashcards ----

def create_flashcard(user_id: str, topic_id: str, question: str, answer: str) -> Flashcard:
    topic = get_owned_topic(user_id, topic_id)
    flashcard = Flashcard(
        topic_id=topic.id,
        subject_id=topic.subject_id,
        question=_require_text(question, "A question is required."),
        answer=_require_text(answer, "An answer is required."),
        timestamp=store.server_timestamp(),
    )
    with store.remote_operation("save the flashcard"):
        result = store.get_collection(store.FLASHCARDS).insert_one(flashcard.to_document())
    flashcard_id = str(result.inserted_id)
    logger.info("Created flashcard %s in topic %s", flashcard_id, topic.id)
    _bump_counter(store.TOPICS, topic.id, "flashcardCount", 1)
    return flashcard.model_copy(update={"id": flashcard_id})


def list_flashcards(topic_id: str) -> list[Flashcard]:
    """
    Flashcards of a topic in creation order.
    """
    with store.remote_operation("load flashcards"):
        docs = list(
            store.get_collection(store.FLASHCARDS)
            .find({"topicId": topic_id})
            .sort(store.CREATION_ORDER)
        )
    return [Flashcard.from_document(doc) for doc in docs]


def list_subject_flashcards(subject_id: str) -> list[Flashcard]:
    """
    Every flashcard in a subject, in no particular order.
    """
    with store.remote_operation("load flashcards"):
        docs = list(store.get_collection(store.FLASHCARDS).find({"subjectId": subject_id}))
    return [Flashcard.from_document(doc) for doc in docs]


def count_subject_flashcards(subject_id: str) -> int:
    """Number of flashcards currently stored under a subject."""
    with store.remote_operation("count flashcards"):
        return store.get_collection(store.FLASHCARDS).count_documents({"subjectId": subject_id})


def has_flashcards(subject_id: str) -> bool:
    with store.remote_operation("check for flashcards"):
        return store.get_collection(store.FLASHCARDS).find_one({"subjectId": subject_id}) is not None


def get_flashcard(flashcard_id: str) -> Flashcard:
    with store.remote_operation("load the flashcard"):
        doc = store.get_collection(store.FLASHCARDS).find_one({"_id": _object_id(flashcard_id)})
    if doc is None:
        raise NotFoundError("That flashcard no longer exists.")
    return Flashcard.from_document(doc)


def update_flashcard(user_id: str, flashcard_id: str, question: str, answer: str) -> Flashcard:
    flashcard = get_flashcard(flashcard_id)
    get_subject(user_id, flashcard.subject_id)
    question = _require_text(question, "A question is required.")
    answer = _require_text(answer, "An answer is required.")
    with store.remote_operation("update the flashcard"):
        store.get_collection(store.FLASHCARDS).update_one(
            {"_id": _object_id(flashcard.id)},
            {"$set": {"question": question, "answer": answer}},
        )
    return flashcard.model_copy(update={"question": question, "answer": answer})


def delete_flashcard(user_id: str, flashcard_id: str) -> None:
    """
    Delete a flashcard and decrement its topic's flashcardCount.
    """
    flashcard = get_flashcard(flashcard_id)
    get_subject(user_id, flashcard.subject_id)
    with store.remote_operation("delete the flashcard"):
        store.get_collection(store.FLASHCARDS).delete_one({"_id": _object_id(flashcard.id)})
    logger.info("Deleted flashcard %s from topic %s", flashcard.id, flashcard.topic_id)
    _bump_counter(store.TOPICS, flashcard.topic_id, "flashcardCount", -1)


# ---- Maintenance ----

def reconcile_counters(user_id: str) -> int:
    """
    Recompute topicCount and flashcardCount from live documents.

    Returns:
        Number of documents whose counter was corrected
    """
    corrected = 0
    subjects = list_subjects(user_id)
    with store.remote_operation("reconcile counters"):
        topics_col = store.get_collection(store.TOPICS)
        cards_col = store.get_collection(store.FLASHCARDS)
        subjects_col = store.get_collection(store.SUBJECTS)

        for subject in subjects:
            topics = list(topics_col.find({"subjectId": subject.id}))
            if subject.topic_count != len(topics):
                subjects_col.update_one(
                    {"_id": _object_id(subject.id)},
                    {"$set": {"topicCount": len(topics)}},
                )
                logger.warning(
                    "Subject %s topicCount %d -> %d",
                    subject.id, subject.topic_count, len(topics),
                )
                corrected += 1

            for doc in topics:
                topic_id = str(doc["_id"])
                actual = cards_col.count_documents({"topicId": topic_id})
                if doc.get("flashcardCount", 0) != actual:
                    topics_col.update_one(
                        {"_id": doc["_id"]},
                        {"$set": {"flashcardCount": actual}},
                    )
                    logger.warning(
                        "Topic %s flashcardCount %d -> %d",
                        topic_id, doc.get("flashcardCount", 0), actual,
                    )
                    corrected += 1

    return corrected
