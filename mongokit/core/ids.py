"""
Document identifier normalization.
"""

from typing import Any

from bson import ObjectId


def normalize_id(value: Any) -> Any:
    """
    Convert an identifier to an ObjectId when it is a valid one.

    24-character hex strings become ``ObjectId`` instances. Everything else,
    including ObjectIds, is returned unchanged. Never raises.

    Args:
        value: Identifier as read from the command line or an input file

    Returns:
        ObjectId or the original value
    """
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value
