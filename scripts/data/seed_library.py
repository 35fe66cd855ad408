"""
Import subjects, topics and flashcards from a JSON file.

Expected format:
    [
      {
        "title": "Biology",
        "topics": [
          {
            "title": "Cells",
            "flashcards": [
              {"question": "What is the powerhouse of the cell?", "answer": "Mitochondria"}
            ]
          }
        ]
      }
    ]

Usage:
    python -m scripts.data.seed_library library.json --email someone@example.com
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from core import config, content_repo, users_repo


def seed_library(user_id: str, subjects: list[dict]) -> dict[str, int]:
    """
    Create every subject, topic and flashcard in the given structure.

    Returns:
        Counts of created subjects, topics and flashcards
    """
    counts = {"subjects": 0, "topics": 0, "flashcards": 0}
    for subject_data in subjects:
        subject = content_repo.create_subject(user_id, subject_data["title"])
        counts["subjects"] += 1
        for topic_data in subject_data.get("topics", []):
            topic = content_repo.create_topic(user_id, subject.id, topic_data["title"])
            counts["topics"] += 1
            for card in topic_data.get("flashcards", []):
                content_repo.create_flashcard(user_id, topic.id, card["question"], card["answer"])
                counts["flashcards"] += 1
    return counts


def main():
    parser = argparse.ArgumentParser(description="Import a flashcard library from JSON")
    parser.add_argument("path", type=Path, help="JSON file with subjects")
    parser.add_argument("--email", required=True, help="Email of the owning account")

    args = parser.parse_args()
    logging.basicConfig(level=config.get_log_level())

    profile = users_repo.find_user_by_email(args.email)
    if profile is None:
        print(f"No account found for {args.email}")
        return

    with open(args.path, 'r', encoding='utf-8') as f:
        subjects = json.load(f)

    counts = seed_library(profile.id, subjects)
    print(
        f"✓ Imported {counts['subjects']} subject(s), {counts['topics']} topic(s), "
        f"{counts['flashcards']} flashcard(s) into {config.get_database_name()}"
    )


if __name__ == "__main__":
    main()
