"""
Command line interface for MongoKit.

    mongokit get|set|update <noun> [arguments]

This module is part of MongoKit - MongoDB command line toolkit.
"""

__all__ = []
