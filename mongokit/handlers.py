"""
Operation handlers, one per command.

Each handler reads its input through the codec (if any), runs the driver
calls in ``mongokit.core.operations`` on the session's client and writes its
output through the codec (if any).

This module is part of MongoKit - MongoDB command line toolkit.
"""

import logging
from typing import Optional

from .codec import STDIO, read_data, write_data
from .core import operations
from .core.connection import ConnectionManager

logger = logging.getLogger(__name__)


async def get_databases(session: ConnectionManager, output: str = STDIO) -> None:
    client = await session.connect()
    names = await operations.list_databases(client)
    write_data(output, names)


async def get_database(
    session: ConnectionManager, database: str, output: str = STDIO
) -> None:
    client = await session.connect()
    collections = await operations.fetch_database(client, database)
    logger.info(f"Fetched {len(collections)} collection(s) from '{database}'")
    write_data(output, collections)


async def get_collections(
    session: ConnectionManager, database: str, output: str = STDIO
) -> None:
    client = await session.connect()
    names = await operations.list_collections(client, database)
    write_data(output, names)


async def get_collection(
    session: ConnectionManager, database: str, collection: str, output: str = STDIO
) -> None:
    client = await session.connect()
    documents = await operations.fetch_collection(client, database, collection)
    logger.info(f"Fetched {len(documents)} document(s) from '{database}.{collection}'")
    write_data(output, documents)


async def get_documents(
    session: ConnectionManager, database: str, collection: str, output: str = STDIO
) -> None:
    client = await session.connect()
    ids = await operations.fetch_document_ids(client, database, collection)
    write_data(output, ids)


async def get_document(
    session: ConnectionManager,
    database: str,
    collection: str,
    document_id: str,
    output: str = STDIO,
) -> None:
    """Write the document, or null when no document has that identifier."""
    client = await session.connect()
    document = await operations.fetch_document(client, database, collection, document_id)
    if document is None:
        logger.info(f"No document '{document_id}' in '{database}.{collection}'")
    write_data(output, document)


async def set_collection(
    session: ConnectionManager,
    database: str,
    collection: str,
    input: str = STDIO,
    drop: bool = False,
) -> None:
    """
    Replace documents in a collection from a list of documents.

    With ``drop`` the whole collection is discarded first.
    """
    client = await session.connect()
    data = read_data(input)
    count = await operations.replace_collection(
        client, database, collection, data, drop=drop
    )
    logger.info(f"Set {count} document(s) in '{database}.{collection}'")


async def set_document(
    session: ConnectionManager,
    database: str,
    collection: str,
    document_id: Optional[str] = None,
    input: str = STDIO,
) -> None:
    client = await session.connect()
    data = read_data(input)
    written_id = await operations.replace_document(
        client, database, collection, data, document_id=document_id
    )
    logger.info(f"Set document '{written_id}' in '{database}.{collection}'")


async def update_document(
    session: ConnectionManager,
    database: str,
    collection: str,
    document_id: str,
    input: str = STDIO,
    upsert: bool = False,
) -> None:
    """Set the fields from the input on one document; other fields are kept."""
    client = await session.connect()
    data = read_data(input)
    result = await operations.patch_document(
        client, database, collection, document_id, data, upsert=upsert
    )
    if not result.matched_count and result.upserted_id is None:
        logger.warning(f"No document '{document_id}' in '{database}.{collection}'")
