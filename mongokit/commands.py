"""
Command table and dispatcher.

Every command is one ``CommandSpec`` row: its verb and noun, aliases,
positional arguments, flags and handler. The click tree in
``mongokit.cli.main`` is built from this table, and lookups here are exact
string matches on names and aliases.

This module is part of MongoKit - MongoDB command line toolkit.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from . import handlers
from .codec import STDIO
from .config import Settings
from .core.connection import ConnectionManager, require_uri
from .exceptions import CommandNotImplementedError, UnknownCommandError

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[None]]

REPLACE_WARNING = "wipes out documents that are being replaced"
UPDATE_WARNING = "wipes out only specified fields, other fields are left untouched"


@dataclass(frozen=True)
class ArgumentSpec:
    """A positional argument."""

    name: str
    metavar: str
    required: bool = True
    default: Optional[str] = None


@dataclass(frozen=True)
class FlagSpec:
    """A boolean ``--flag`` option."""

    name: str
    help: str


@dataclass(frozen=True)
class VerbSpec:
    name: str
    aliases: Tuple[str, ...]
    help: str


@dataclass(frozen=True)
class CommandSpec:
    """One leaf command: ``<verb> <noun> [arguments] [flags]``."""

    verb: str
    noun: str
    aliases: Tuple[str, ...]
    help: str
    handler: Optional[Handler]
    arguments: Tuple[ArgumentSpec, ...] = ()
    flags: Tuple[FlagSpec, ...] = ()

    @property
    def path(self) -> str:
        return f"{self.verb} {self.noun}"


DATABASE = ArgumentSpec("database", "DATABASE")
COLLECTION = ArgumentSpec("collection", "COLLECTION")
DOCUMENT_ID = ArgumentSpec("document_id", "DOCUMENT-ID")
OPTIONAL_DOCUMENT_ID = ArgumentSpec("document_id", "[DOCUMENT-ID]", required=False)
OUTPUT = ArgumentSpec("output", "[-|OUTPUT-FILE]", required=False, default=STDIO)
INPUT = ArgumentSpec("input", "[-|INPUT-FILE]", required=False, default=STDIO)

DROP = FlagSpec("drop", "Drops the collection before setting documents")
UPSERT = FlagSpec("upsert", "Inserts documents if they don't exist")

VERBS: Tuple[VerbSpec, ...] = (
    VerbSpec("get", ("g",), "Gets data from the database"),
    VerbSpec(
        "set",
        ("s",),
        f"Adds or replaces documents in the database ({REPLACE_WARNING})",
    ),
    VerbSpec(
        "update",
        ("u",),
        f"Updates or adds fields to documents in the database ({UPDATE_WARNING})",
    ),
)

COMMANDS: Tuple[CommandSpec, ...] = (
    CommandSpec(
        "get",
        "databases",
        ("dbs",),
        "Gets the list of databases from the server",
        handlers.get_databases,
        (OUTPUT,),
    ),
    CommandSpec(
        "get",
        "database",
        ("db",),
        "Gets an entire database from the server",
        handlers.get_database,
        (DATABASE, OUTPUT),
    ),
    CommandSpec(
        "get",
        "collections",
        ("cols",),
        "Gets the list of collections from the database",
        handlers.get_collections,
        (DATABASE, OUTPUT),
    ),
    CommandSpec(
        "get",
        "collection",
        ("col",),
        "Gets a collection from the database",
        handlers.get_collection,
        (DATABASE, COLLECTION, OUTPUT),
    ),
    CommandSpec(
        "get",
        "documents",
        ("docs",),
        "Gets the list of document ids from the collection",
        handlers.get_documents,
        (DATABASE, COLLECTION, OUTPUT),
    ),
    CommandSpec(
        "get",
        "document",
        ("doc",),
        "Gets a document from the database",
        handlers.get_document,
        (DATABASE, COLLECTION, DOCUMENT_ID, OUTPUT),
    ),
    CommandSpec(
        "set",
        "collection",
        ("col",),
        f"Replaces the requested documents in the specified collection ({REPLACE_WARNING})",
        handlers.set_collection,
        (DATABASE, COLLECTION, INPUT),
        (DROP,),
    ),
    CommandSpec(
        "set",
        "document",
        ("doc",),
        "Replaces the specified document (wipes out the document that is being replaced)",
        handlers.set_document,
        (DATABASE, COLLECTION, OPTIONAL_DOCUMENT_ID, INPUT),
    ),
    CommandSpec(
        "update",
        "collection",
        ("col",),
        f"Updates or adds fields to each document in the collection ({UPDATE_WARNING})",
        None,
        (),
        (UPSERT,),
    ),
    CommandSpec(
        "update",
        "document",
        ("doc",),
        f"Updates or adds fields to the document ({UPDATE_WARNING})",
        handlers.update_document,
        (DATABASE, COLLECTION, DOCUMENT_ID, INPUT),
        (UPSERT,),
    ),
)


def resolve_verb(name: str) -> VerbSpec:
    """Find a verb by name or alias."""
    for verb in VERBS:
        if name == verb.name or name in verb.aliases:
            return verb
    raise UnknownCommandError(f"Unknown command '{name}'")


def commands_for(verb: str) -> Tuple[CommandSpec, ...]:
    """Commands of one verb, in declaration order."""
    verb_name = resolve_verb(verb).name
    return tuple(command for command in COMMANDS if command.verb == verb_name)


def find_command(verb: str, noun: str) -> CommandSpec:
    """
    Find a command by verb and noun, names or aliases.

    Raises:
        UnknownCommandError: If no command matches exactly
    """
    for command in commands_for(verb):
        if noun == command.noun or noun in command.aliases:
            return command
    raise UnknownCommandError(f"Unknown command '{verb} {noun}'")


async def dispatch(
    command: CommandSpec, settings: Settings, params: Dict[str, Any]
) -> None:
    """
    Run one command inside a connection scope.

    The connection, if one was opened, is closed before this returns or
    raises.

    Raises:
        CommandNotImplementedError: If the command has no handler
        ConfigurationError: If no URI is configured, before any input is read
    """
    if command.handler is None:
        raise CommandNotImplementedError(f"'{command.path}' is not implemented")
    require_uri(settings.uri)

    logger.debug(f"Dispatching '{command.path}' with {params}")
    async with ConnectionManager(
        settings.uri,
        server_selection_timeout_ms=settings.server_selection_timeout_ms,
    ) as session:
        await command.handler(session, **params)
