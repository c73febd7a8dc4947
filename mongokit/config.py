"""
Runtime configuration for MongoKit.

Settings come from command line options, which click backs with the
``MONGO_URI`` and ``MONGO_TIMEOUT_MS`` environment variables. ``main()`` loads
a ``.env`` file first so those variables can live there too.

This module is part of MongoKit - MongoDB command line toolkit.
"""

import logging
import sys
from typing import Optional

from pydantic import BaseModel, Field, field_validator

URI_ENVVAR = "MONGO_URI"
TIMEOUT_ENVVAR = "MONGO_TIMEOUT_MS"
DEFAULT_TIMEOUT_MS = 30000

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    """Options shared by every command in a single run."""

    uri: Optional[str] = None
    server_selection_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    verbose: bool = False

    @field_validator("uri")
    @classmethod
    def _blank_uri_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


def configure_logging(settings: Settings) -> None:
    """
    Send log records to stderr, at DEBUG when ``settings.verbose`` is set and
    WARNING otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if settings.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    # motor/pymongo are chatty at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
