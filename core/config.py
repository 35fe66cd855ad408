"""
Environment configuration.

Settings are read from the process environment (a local .env file is loaded
once on import).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from core.errors import ConfigurationError

load_dotenv()

# Defaults
DEFAULT_DB_NAME = "studyspot"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_LOG_LEVEL = "INFO"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_mongo_uri() -> str:
    """
    Get the MongoDB connection string.

    Raises:
        ConfigurationError: If MONGO_URI is not set
    """
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ConfigurationError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_database_name() -> str:
    """
    Get the document database name.

    In test mode the name gets a ``test_`` prefix so test sessions never
    write into the production collections.
    """
    name = os.getenv("MONGO_DB_NAME", DEFAULT_DB_NAME)
    if is_test_mode():
        return f"test_{name}"
    return name


def get_openai_api_key() -> str:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY not found in environment variables")
    return api_key


def get_openai_model() -> str:
    return os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
