"""
Connection lifecycle for a single MongoKit run.

One ``ConnectionManager`` is opened per command. The client is created on the
first ``connect()`` and reused afterwards; leaving the ``async with`` block
closes it on every exit path.

This module is part of MongoKit - MongoDB command line toolkit.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from motor.motor_asyncio import AsyncIOMotorClient

from ..config import DEFAULT_TIMEOUT_MS, URI_ENVVAR
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def redact_uri(uri: str) -> str:
    """Strip credentials from a connection string for logging."""
    parts = urlsplit(uri)
    if "@" not in parts.netloc:
        return uri
    host = parts.netloc.rsplit("@", 1)[1]
    return parts._replace(netloc=f"***@{host}").geturl()


def require_uri(uri: Optional[str]) -> str:
    """
    Return the URI, or fail when none is configured.

    Raises:
        ConfigurationError: If the URI is missing or empty
    """
    if not uri:
        raise ConfigurationError(
            f"Mongo URI must be set using --uri argument or via the "
            f"{URI_ENVVAR} environment variable"
        )
    return uri


class ConnectionManager:
    """
    Owns the MongoDB client for one run.

    Usage:
        async with ConnectionManager(uri) as session:
            client = await session.connect()
    """

    def __init__(
        self,
        uri: Optional[str],
        server_selection_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        """
        Args:
            uri: MongoDB connection string
            server_selection_timeout_ms: How long the driver waits for a server
        """
        self.uri = uri
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> AsyncIOMotorClient:
        """
        Return the client, creating and verifying it on first use.

        Raises:
            ConfigurationError: If no URI was configured
            pymongo.errors.PyMongoError: If the server cannot be reached
        """
        if self._client is not None:
            return self._client

        uri = require_uri(self.uri)
        logger.debug(f"Connecting to {redact_uri(uri)}")
        client = AsyncIOMotorClient(
            uri,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )
        try:
            await client.admin.command("ping")
        except Exception:
            client.close()
            raise

        self._client = client
        logger.info(f"Connected to {redact_uri(uri)}")
        return client

    async def disconnect(self) -> None:
        """Close the client if one is open. Safe to call repeatedly."""
        if self._client is None:
            return
        self._client.close()
        self._client = None
        logger.debug("Disconnected from MongoDB")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
