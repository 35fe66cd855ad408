"""
AI-assisted flashcard generation.

The model is asked for line-prefixed cards:

    Question: ...
    Answer: ...

with multiple cards separated by FLASHCARD_SEPARATOR. Parsing is tolerant:
a segment missing either field is dropped, and only an empty overall result
is treated as a failure.
"""

from __future__ import annotations

import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from core import config
from core.errors import GenerationError
from core.schemas import GeneratedFlashcard

logger = logging.getLogger(__name__)

FLASHCARD_SEPARATOR = "---FLASHCARD_SEPARATOR---"
QUESTION_PREFIX = "question:"
ANSWER_PREFIX = "answer:"
DEFAULT_CONTEXT = "General Knowledge"

SYSTEM_PROMPT = "You write short, accurate study flashcards."

# Initialize OpenAI client (module-level, reused across calls)
_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    """Get or create the OpenAI client."""
    global _client
    if _client is None:
        _client = OpenAI(api_key=config.get_openai_api_key())
    return _client


def build_prompt(
    subject_title: Optional[str],
    topic_title: Optional[str],
    extra_context: Optional[str] = None,
    count: int = 1
) -> str:
    """
    Build the generation prompt.

    Args:
        subject_title: Title of the subject, prefixed to the context when set
        topic_title: Title of the topic (falls back to general knowledge)
        extra_context: Free text the user wants the card to cover
        count: Number of cards to ask for

    Returns:
        Prompt text
    """
    context = (topic_title or "").strip() or DEFAULT_CONTEXT
    subject = (subject_title or "").strip()
    if subject:
        context = f"{subject} - {context}"

    prompt = "You are a helpful assistant that creates educational flashcards.\n"
    prompt += f"Generate exactly {count} flashcard(s) for the topic or subject: \"{context}\".\n"

    extra = (extra_context or "").strip()
    if extra:
        prompt += f"Consider this additional context or specific terms: \"{extra}\".\n"

    prompt += (
        "For each flashcard, provide a clear 'Question:' and a concise 'Answer:'.\n"
        "Format each flashcard strictly as:\n"
        "Question: [Your Question Here]\n"
        "Answer: [Your Answer Here]\n"
        "If generating multiple flashcards, ensure each flashcard (Question and Answer pair) "
        f"is separated by exactly '{FLASHCARD_SEPARATOR}'. Do not use this separator anywhere "
        "else within a single flashcard's question or answer."
    )
    return prompt


def _parse_segment(segment: str) -> Optional[GeneratedFlashcard]:
    question = ""
    answer = ""
    for line in segment.splitlines():
        stripped = line.strip()
        lowered = stripped.lower()
        if lowered.startswith(QUESTION_PREFIX):
            question = stripped[len(QUESTION_PREFIX):].strip()
        elif lowered.startswith(ANSWER_PREFIX):
            answer = stripped[len(ANSWER_PREFIX):].strip()

    if not question or not answer:
        return None
    return GeneratedFlashcard(question=question, answer=answer)


def parse_generated_flashcards(text: Optional[str]) -> list[GeneratedFlashcard]:
    """
    Parse a model response into flashcards.

    Segments without both a question and an answer are skipped.
    """
    cards = []
    for segment in (text or "").split(FLASHCARD_SEPARATOR):
        segment = segment.strip()
        if not segment:
            continue
        card = _parse_segment(segment)
        if card is None:
            logger.warning("Dropped malformed generated segment: %r", segment[:80])
            continue
        cards.append(card)
    return cards


def generate_flashcards(
    subject_title: Optional[str],
    topic_title: Optional[str],
    extra_context: Optional[str] = None,
    count: int = 1,
    model: Optional[str] = None
) -> list[GeneratedFlashcard]:
    """
    Ask the model for flashcards and parse its answer.

    Returns:
        At least one GeneratedFlashcard

    Raises:
        GenerationError: If the API call fails or nothing usable came back
    """
    prompt = build_prompt(subject_title, topic_title, extra_context, count)
    logger.info("Requesting %d generated flashcard(s) for '%s'", count, topic_title or DEFAULT_CONTEXT)

    try:
        completion = get_client().chat.completions.create(
            model=model or config.get_openai_model(),
            messages=[
                {
                    "role": "system",
                    "content": SYSTEM_PROMPT
                },
                {
                    "role": "user",
                    "content": prompt
                }
            ],
        )
    except OpenAIError as exc:
        logger.error("Flashcard generation request failed", exc_info=True)
        raise GenerationError("Could not reach the flashcard generator. Please try again.") from exc

    text = completion.choices[0].message.content if completion.choices else None
    cards = parse_generated_flashcards(text)
    if not cards:
        logger.warning("Generated response contained no usable flashcards")
        raise GenerationError("Could not generate a flashcard from the response.")
    return cards
