"""Persistence: the data store contract and its implementations."""

from .data_store import DataStore, InMemoryDataStore, ProgressEntry
from .file_store import FileDataStore

__all__ = ["DataStore", "FileDataStore", "InMemoryDataStore", "ProgressEntry"]
