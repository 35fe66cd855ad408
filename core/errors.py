"""
Error taxonomy for StudySpot.

Every error carries a short ``user_message`` that the UI can show as-is.
None of them are meant to terminate the running app session.
"""

from __future__ import annotations

from typing import Optional


class StudySpotError(Exception):
    """Base class for all application errors."""

    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class ConfigurationError(StudySpotError):
    default_message = "The app is not configured correctly."


class NotAuthenticatedError(StudySpotError):
    default_message = "Please sign in first."


class MissingContextError(StudySpotError):
    default_message = "A subject or topic must be selected first."


class ValidationError(StudySpotError):
    default_message = "Some required fields are empty."


class NotFoundError(StudySpotError):
    default_message = "The requested item could not be found."


class RemoteOperationError(StudySpotError):
    """A query or write against the document store failed."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Could not {operation}. Please try again.")


class GenerationError(StudySpotError):
    default_message = "Could not generate a flashcard."
