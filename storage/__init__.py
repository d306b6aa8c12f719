"""Speicherung des Datenbestands als JSON."""

from storage.json_store import JsonStore, StorageError

__all__ = ["JsonStore", "StorageError"]
