"""
User profiles and the signed-in identity.

Authentication itself is delegated; this module only stores the profile
document for a stable user id and guards operations that need one.
"""

from __future__ import annotations

import logging
from typing import Optional

from core import store
from core.errors import NotAuthenticatedError, ValidationError
from core.schemas import UserProfile

logger = logging.getLogger(__name__)


def require_user_id(user_id: Optional[str]) -> str:
    """
    Return the user id, or raise if nobody is signed in.

    Raises:
        NotAuthenticatedError: If user_id is missing or blank
    """
    if not user_id or not str(user_id).strip():
        raise NotAuthenticatedError()
    return str(user_id)


def create_user_profile(user_id: str, display_name: str, email: str) -> UserProfile:
    """
    Create (or overwrite) the profile document for a user.

    Args:
        user_id: Stable identifier from the identity provider
        display_name: Name shown in the app
        email: Contact email (also used to look the user up on sign-in)

    Returns:
        The stored UserProfile
    """
    user_id = require_user_id(user_id)
    display_name = (display_name or "").strip()
    email = (email or "").strip().lower()
    if not display_name or not email:
        raise ValidationError("Name and email are required.")

    profile = UserProfile(
        display_name=display_name,
        email=email,
        created_at=store.server_timestamp(),
    )
    with store.remote_operation("save your profile"):
        store.get_collection(store.USERS).replace_one(
            {"_id": user_id},
            profile.to_document(),
            upsert=True,
        )
    logger.info("Created profile for user %s", user_id)
    return profile.model_copy(update={"id": user_id})


def get_user_profile(user_id: str) -> Optional[UserProfile]:
    user_id = require_user_id(user_id)
    with store.remote_operation("load your profile"):
        doc = store.get_collection(store.USERS).find_one({"_id": user_id})
    if doc is None:
        return None
    return UserProfile.from_document(doc)


def find_user_by_email(email: str) -> Optional[UserProfile]:
    """Look up a profile by email (case-insensitive)."""
    email = (email or "").strip().lower()
    if not email:
        return None
    with store.remote_operation("look up your account"):
        doc = store.get_collection(store.USERS).find_one({"email": email})
    if doc is None:
        return None
    return UserProfile.from_document(doc)


def delete_user_profile(user_id: str) -> bool:
    """
    Remove the user's profile document.

    Content the user created is left in place; callers that want it gone
    delete it first.

    Returns:
        True if a profile was deleted
    """
    user_id = require_user_id(user_id)
    with store.remote_operation("delete your account"):
        deleted = store.get_collection(store.USERS).delete_one({"_id": user_id})
    logger.info("Deleted profile for user %s (found=%s)", user_id, deleted.deleted_count == 1)
    return deleted.deleted_count == 1
