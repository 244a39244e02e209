"""Record store SPI and its SQLite implementation."""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Iterable

from ..config.models import MEMORY_DATABASE
from ..engine import Record
from ..errors import StorageError


class RecordStore(ABC):
    """Append-only sink/source for extracted records."""

    @abstractmethod
    def init_schema(self) -> None:
        """Create the backing table if it does not exist yet."""

    @abstractmethod
    def insert(self, record: Record) -> None:
        """Persist a single record."""

    def insert_many(self, records: Iterable[Record]) -> int:
        count = 0
        for record in records:
            self.insert(record)
            count += 1
        return count

    @abstractmethod
    def list_all(self) -> list[Record]:
        """Return every stored record in insertion order."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SQLiteRecordStore(RecordStore):
    """Persist records as ``(name, date, year)`` rows in SQLite."""

    def __init__(self, path: Path | str, table: str = "holidays") -> None:
        if not table.isidentifier():
            raise StorageError(f"Invalid table name: {table!r}")
        self.path = str(path)
        self.table = table
        self._lock = Lock()
        if self.path != MEMORY_DATABASE:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self.conn = sqlite3.connect(self.path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database {self.path}: {exc}") from exc
        self.conn.row_factory = sqlite3.Row

    def init_schema(self) -> None:
        with self._lock:
            try:
                self.conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        id INTEGER PRIMARY KEY,
                        name TEXT NOT NULL,
                        date TEXT NOT NULL,
                        year TEXT NOT NULL
                    )
                    """
                )
                self.conn.commit()
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot create table {self.table}: {exc}") from exc

    def insert(self, record: Record) -> None:
        self.insert_many([record])

    def insert_many(self, records: Iterable[Record]) -> int:
        rows = [(record.entity_name, record.date_text, record.year) for record in records]
        with self._lock:
            try:
                with self.conn:
                    self.conn.executemany(
                        f"INSERT INTO {self.table} (name, date, year) VALUES (?, ?, ?)",
                        rows,
                    )
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot insert into {self.table}: {exc}") from exc
        return len(rows)

    def list_all(self) -> list[Record]:
        with self._lock:
            try:
                cursor = self.conn.execute(
                    f"SELECT name, date, year FROM {self.table} ORDER BY id"
                )
                rows = cursor.fetchall()
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot read from {self.table}: {exc}") from exc
        return [Record(year=row["year"], entity_name=row["name"], date_text=row["date"]) for row in rows]

    def close(self) -> None:
        with self._lock:
            self.conn.close()


__all__ = ["RecordStore", "SQLiteRecordStore"]
