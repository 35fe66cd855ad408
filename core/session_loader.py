"""
Content Loader: resolve the ordered flashcard queue for a test session.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from core import content_repo
from core.errors import MissingContextError, RemoteOperationError
from core.schemas import Flashcard, TestMode, Topic
from core.users_repo import require_user_id

logger = logging.getLogger(__name__)


@dataclass
class LoadedQueue:
    """
    Cards for one session plus the topic-id to title lookup.

    failed_topics lists topics whose cards could not be fetched and were
    skipped (topic-by-topic mode only).
    """
    queue: list[Flashcard]
    topic_titles: dict[str, str]
    failed_topics: list[Topic] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failed_topics)


def load_queue(
    user_id: Optional[str],
    mode: TestMode,
    subject_id: Optional[str],
    topic_id: Optional[str] = None,
    shuffle: Callable[[list], None] = random.shuffle
) -> LoadedQueue:
    """
    Load the cards for a session.

    Args:
        user_id: Signed-in user; the subject or topic must belong to them
        mode: Test mode deciding selection and order
        subject_id: Subject being tested
        topic_id: Topic being tested (single-topic mode only)
        shuffle: In-place shuffle applied once in random mode

    Returns:
        LoadedQueue with the queue in presentation order

    Raises:
        NotAuthenticatedError: If nobody is signed in
        NotFoundError: If the subject or topic does not belong to the user
        MissingContextError: If the subject or topic id needed by the mode is missing
        RemoteOperationError: If the main query fails
    """
    user_id = require_user_id(user_id)
    mode = TestMode(mode)

    if mode == TestMode.SPECIFIC_TOPIC:
        if not topic_id:
            raise MissingContextError("Choose a topic to test.")
        return _load_topic(content_repo.get_owned_topic(user_id, topic_id))

    if not subject_id:
        raise MissingContextError("Choose a subject to test.")
    subject_id = content_repo.get_subject(user_id, subject_id).id

    if mode == TestMode.RANDOM_ALL_SUBJECT:
        return _load_random(subject_id, shuffle)
    return _load_sequential(subject_id)


def _load_topic(topic: Topic) -> LoadedQueue:
    queue = content_repo.list_flashcards(topic.id)
    logger.info("Loaded %d cards for topic %s", len(queue), topic.id)
    return LoadedQueue(queue=queue, topic_titles={topic.id: topic.title})


def _load_random(subject_id: str, shuffle: Callable[[list], None]) -> LoadedQueue:
    titles = {topic.id: topic.title for topic in content_repo.list_topics(subject_id)}
    queue = content_repo.list_subject_flashcards(subject_id)
    shuffle(queue)
    logger.info("Loaded %d shuffled cards for subject %s", len(queue), subject_id)
    return LoadedQueue(queue=queue, topic_titles=titles)


def _load_sequential(subject_id: str) -> LoadedQueue:
    topics = content_repo.list_topics(subject_id)
    titles = {topic.id: topic.title for topic in topics}

    queue: list[Flashcard] = []
    failed: list[Topic] = []
    for topic in topics:
        try:
            cards = content_repo.list_flashcards(topic.id)
        except RemoteOperationError:
            logger.warning("Skipping topic %s ('%s'): cards could not be loaded", topic.id, topic.title)
            failed.append(topic)
            continue
        queue.extend(cards)

    logger.info(
        "Loaded %d cards from %d topics for subject %s (%d skipped)",
        len(queue), len(topics) - len(failed), subject_id, len(failed),
    )
    return LoadedQueue(queue=queue, topic_titles=titles, failed_topics=failed)
