"""
Recompute denormalized topic and flashcard counters.

Counter updates are not retried when they fail, so Subject.topicCount and
Topic.flashcardCount can drift from the live documents. This script resets
them to the true counts.

Usage:
    # One user, looked up by email
    python -m scripts.maintenance.reconcile_counters --email someone@example.com

    # Every user
    python -m scripts.maintenance.reconcile_counters --all
"""

from __future__ import annotations

import argparse
import logging

from core import config, content_repo, store, users_repo


def _all_user_ids() -> list[str]:
    with store.remote_operation("list users"):
        return [str(doc["_id"]) for doc in store.get_collection(store.USERS).find({}, {"_id": 1})]


def main():
    parser = argparse.ArgumentParser(description="Recompute topicCount and flashcardCount")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--email",
        help="Reconcile the account with this email"
    )
    group.add_argument(
        "--all",
        action="store_true",
        help="Reconcile every account"
    )

    args = parser.parse_args()
    logging.basicConfig(level=config.get_log_level())

    if args.all:
        user_ids = _all_user_ids()
    else:
        profile = users_repo.find_user_by_email(args.email)
        if profile is None:
            print(f"No account found for {args.email}")
            return
        user_ids = [profile.id]

    print(f"Database: {config.get_database_name()}")
    total = 0
    for user_id in user_ids:
        corrected = content_repo.reconcile_counters(user_id)
        print(f"  {user_id}: {corrected} counter(s) corrected")
        total += corrected

    print(f"\n✓ Reconciled {len(user_ids)} account(s), {total} counter(s) corrected")


if __name__ == "__main__":
    main()
