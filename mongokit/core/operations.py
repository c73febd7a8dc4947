"""
Driver calls behind each command.

Every function takes an ``AsyncIOMotorClient`` and performs one translation
into motor calls. Reading and writing files is left to ``mongokit.handlers``.

This module is part of MongoKit - MongoDB command line toolkit.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from bson import ObjectId

from ..exceptions import InvalidInputError
from .ids import normalize_id

logger = logging.getLogger(__name__)

ID_FIELD = "_id"

Document = Dict[str, Any]


async def list_databases(client) -> List[str]:
    """List database names on the server."""
    return await client.list_database_names()


async def list_collections(client, database: str) -> List[str]:
    """List collection names in a database."""
    return await client[database].list_collection_names()


async def fetch_collection(client, database: str, collection: str) -> List[Document]:
    """Fetch every document in a collection."""
    return await client[database][collection].find().to_list(length=None)


async def fetch_database(client, database: str) -> List[Dict[str, Any]]:
    """
    Fetch every collection of a database with its documents.

    Returns:
        List of ``{"name": ..., "documents": [...]}`` entries
    """
    output = []
    for name in await list_collections(client, database):
        output.append(
            {
                "name": name,
                "documents": await fetch_collection(client, database, name),
            }
        )
    return output


async def fetch_document_ids(client, database: str, collection: str) -> List[Any]:
    """Fetch the identifier of every document in a collection."""
    cursor = client[database][collection].find({}, {ID_FIELD: 1})
    return [doc[ID_FIELD] for doc in await cursor.to_list(length=None)]


async def fetch_document(
    client, database: str, collection: str, document_id: Any
) -> Optional[Document]:
    """
    Fetch one document by identifier.

    Returns:
        The document, or None if no document has that identifier
    """
    return await client[database][collection].find_one(
        {ID_FIELD: normalize_id(document_id)}
    )


async def replace_collection(
    client,
    database: str,
    collection: str,
    documents: Sequence[Mapping[str, Any]],
    drop: bool = False,
) -> int:
    """
    Replace or insert each document, keyed by its ``_id``.

    Documents are written one at a time in input order, so a later document
    wins over an earlier one with the same identifier. There is no rollback:
    if a write fails, earlier documents stay written.

    Args:
        client: Motor client
        database: Database name
        collection: Collection name
        documents: Documents to write
        drop: Drop the collection before writing

    Returns:
        Number of documents written
    """
    if not isinstance(documents, (list, tuple)):
        raise InvalidInputError(
            f"Expected a list of documents for '{database}.{collection}', "
            f"got {type(documents).__name__}"
        )

    target = client[database][collection]
    if drop:
        logger.info(f"Dropping collection '{database}.{collection}'")
        await target.drop()

    count = 0
    for index, document in enumerate(documents):
        if not isinstance(document, Mapping):
            raise InvalidInputError(
                f"Document {index} is not a mapping: {document!r}"
            )
        body = dict(document)
        if ID_FIELD in body:
            document_id = normalize_id(body.pop(ID_FIELD))
        else:
            document_id = ObjectId()
            logger.warning(
                f"Document {index} has no {ID_FIELD}, inserting as {document_id}"
            )
        await target.replace_one({ID_FIELD: document_id}, body, upsert=True)
        count += 1
    return count


async def replace_document(
    client,
    database: str,
    collection: str,
    document: Mapping[str, Any],
    document_id: Any = None,
) -> Any:
    """
    Replace or insert a single document.

    The identifier comes from ``document_id`` when given, otherwise from the
    document's own ``_id``, otherwise a new ObjectId is generated.

    Returns:
        The identifier the document was written under
    """
    if not isinstance(document, Mapping):
        raise InvalidInputError(
            f"Expected a single document, got {type(document).__name__}"
        )
    body = dict(document)
    embedded_id = body.pop(ID_FIELD, None)
    if document_id is None:
        document_id = embedded_id
    document_id = ObjectId() if document_id is None else normalize_id(document_id)

    await client[database][collection].replace_one(
        {ID_FIELD: document_id}, body, upsert=True
    )
    return document_id


async def patch_document(
    client,
    database: str,
    collection: str,
    document_id: Any,
    fields: Mapping[str, Any],
    upsert: bool = False,
):
    """
    Set the given fields on one document, leaving other fields untouched.

    Returns:
        The driver's ``UpdateResult``
    """
    if not isinstance(fields, Mapping):
        raise InvalidInputError(
            f"Expected a single document of fields, got {type(fields).__name__}"
        )
    patch = {key: value for key, value in fields.items() if key != ID_FIELD}
    if not patch:
        raise InvalidInputError("No fields to update")

    return await client[database][collection].update_one(
        {ID_FIELD: normalize_id(document_id)}, {"$set": patch}, upsert=upsert
    )
