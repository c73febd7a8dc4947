"""
MongoKit - MongoDB command line toolkit

Gets, sets and updates MongoDB databases, collections and documents, reading
and writing JSON, YAML or CSV.

Usage:
    mongokit --uri mongodb://localhost:27017 get databases
    MONGO_URI=... mongokit get collection mydb users users.yaml
"""

__version__ = "0.1.0"

from .commands import COMMANDS, CommandSpec, dispatch, find_command
from .config import Settings
from .core import ConnectionManager, normalize_id
from .exceptions import (
    CodecError,
    CommandNotImplementedError,
    ConfigurationError,
    InvalidInputError,
    MongoKitError,
    UnknownCommandError,
    UnsupportedFormatError,
)

__all__ = [
    # Commands
    "COMMANDS",
    "CommandSpec",
    "dispatch",
    "find_command",
    # Core
    "ConnectionManager",
    "Settings",
    "normalize_id",
    # Errors
    "MongoKitError",
    "ConfigurationError",
    "CommandNotImplementedError",
    "UnknownCommandError",
    "InvalidInputError",
    "CodecError",
    "UnsupportedFormatError",
]
