"""
Core MongoKit components: identifier normalization, the connection
lifecycle and the driver calls behind each command.
"""

from .connection import ConnectionManager
from .ids import normalize_id

__all__ = [
    "ConnectionManager",
    "normalize_id",
]
