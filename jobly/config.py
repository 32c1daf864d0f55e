"""Shared settings for Jobly, read from the environment (and .env if present)."""

import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "postgresql:///jobly"
DEFAULT_TEST_DATABASE_URL = "postgresql:///jobly_test"


def load_env() -> None:
    """Load .env from the working directory if present.
    Variables already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def get_database_uri() -> str:
    """Database to use; JOBLY_ENV=test switches to the test database."""
    if os.getenv("JOBLY_ENV") == "test":
        return os.getenv("TEST_DATABASE_URL", DEFAULT_TEST_DATABASE_URL)
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_dir() -> Path:
    return Path(os.getenv("LOG_DIR", "logs"))
