"""
Exceptions raised by MongoKit.

Driver failures are not wrapped: they surface as ``pymongo.errors.PyMongoError``
and are reported by the CLI alongside these.

This module is part of MongoKit - MongoDB command line toolkit.
"""


class MongoKitError(Exception):
    """Base class for MongoKit errors."""


class ConfigurationError(MongoKitError):
    """Raised when required configuration (the connection URI) is missing."""


class CommandNotImplementedError(MongoKitError):
    """Raised when a declared command has no handler."""


class UnknownCommandError(MongoKitError):
    """Raised when a verb/noun pair is not in the command table."""


class InvalidInputError(MongoKitError):
    """Raised when input data has the wrong shape for a command."""


class CodecError(MongoKitError):
    """Raised when data cannot be encoded or decoded."""


class UnsupportedFormatError(CodecError):
    """Raised when a file extension does not map to a known format."""
