"""Infra layer utilities (record storage)."""

from .storage import RecordStore, SQLiteRecordStore

__all__ = ["RecordStore", "SQLiteRecordStore"]
