"""Persistent key-value cache of package metadata.

Records live in a single bucket (``"brew"``) keyed by the package full name,
with JSON-encoded ``PackageInfo`` values. Stores are used through scoped
transactions: a read transaction never sees a partial write, and a write
transaction either commits as a whole or rolls back.

Two backends are provided:

- ``SQLiteInfoStore``: an embedded on-disk store, one table per bucket.
- ``MemoryInfoStore``: a dictionary-backed store for tests and dry runs.
"""

import json
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .errors import PackageNotFoundError, StoreTransactionError
from .info import PackageInfo


BUCKET = "brew"


class Transaction(ABC):
    """Operations available inside ``InfoStore.transaction()``."""

    writable: bool = False

    @abstractmethod
    def create_bucket_if_not_exists(self, bucket: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def has_bucket(self, bucket: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get(self, bucket: str, key: str) -> Optional[bytes]:
        raise NotImplementedError

    @abstractmethod
    def put(self, bucket: str, key: str, value: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def keys(self, bucket: str) -> List[str]:
        raise NotImplementedError

    def _require_writable(self, operation: str) -> None:
        if not self.writable:
            raise StoreTransactionError(
                operation, RuntimeError("write attempted in a read-only transaction")
            )


class InfoStore(ABC):
    """Base class for metadata stores.

    Subclasses implement ``transaction``; lookups and writes of
    ``PackageInfo`` records are shared.
    """

    @abstractmethod
    def transaction(self, write: bool = False):
        """Return a context manager yielding a ``Transaction``."""
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "InfoStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def ensure_bucket(self, bucket: str = BUCKET) -> None:
        """Create the bucket in its own write transaction."""
        with self.transaction(write=True) as tx:
            tx.create_bucket_if_not_exists(bucket)

    def put_info(self, info: PackageInfo) -> None:
        """Write one record in its own write transaction."""
        value = json.dumps(info.to_dict()).encode("utf-8")
        with self.transaction(write=True) as tx:
            tx.put(BUCKET, info.full_name, value)

    def find(self, full_name: str) -> PackageInfo:
        """Look up a single record.

        Raises:
            PackageNotFoundError: If the bucket or the key is absent
            StoreTransactionError: If the stored value cannot be decoded
        """
        with self.transaction() as tx:
            raw = tx.get(BUCKET, full_name) if tx.has_bucket(BUCKET) else None
        if raw is None:
            raise PackageNotFoundError(full_name)
        try:
            return PackageInfo.from_dict(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, AttributeError, TypeError, ValueError) as e:
            raise StoreTransactionError(f"decode of '{full_name}'", e) from e

    def contains(self, full_name: str) -> bool:
        with self.transaction() as tx:
            return tx.has_bucket(BUCKET) and tx.get(BUCKET, full_name) is not None

    def names(self) -> List[str]:
        """Return all cached full names, sorted."""
        with self.transaction() as tx:
            if not tx.has_bucket(BUCKET):
                return []
            return sorted(tx.keys(BUCKET))


class _MemoryTransaction(Transaction):
    def __init__(self, buckets: Dict[str, Dict[str, bytes]], writable: bool):
        self.buckets = buckets
        self.writable = writable

    def create_bucket_if_not_exists(self, bucket: str) -> None:
        self._require_writable("create bucket")
        self.buckets.setdefault(bucket, {})

    def has_bucket(self, bucket: str) -> bool:
        return bucket in self.buckets

    def get(self, bucket: str, key: str) -> Optional[bytes]:
        return self.buckets.get(bucket, {}).get(key)

    def put(self, bucket: str, key: str, value: bytes) -> None:
        self._require_writable("put")
        if bucket not in self.buckets:
            raise StoreTransactionError("put", KeyError(f"bucket '{bucket}' does not exist"))
        self.buckets[bucket][key] = bytes(value)

    def keys(self, bucket: str) -> List[str]:
        return list(self.buckets.get(bucket, {}))


class MemoryInfoStore(InfoStore):
    """In-process store. Write transactions work on a copy that replaces
    the live data only on commit."""

    def __init__(self):
        self._buckets: Dict[str, Dict[str, bytes]] = {}

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[Transaction]:
        if not write:
            yield _MemoryTransaction(self._buckets, writable=False)
            return
        staged = {name: dict(values) for name, values in self._buckets.items()}
        yield _MemoryTransaction(staged, writable=True)
        self._buckets = staged


class _SQLiteTransaction(Transaction):
    def __init__(self, conn: sqlite3.Connection, writable: bool):
        self.conn = conn
        self.writable = writable

    @staticmethod
    def _table(bucket: str) -> str:
        return '"bucket_' + bucket.replace('"', '""') + '"'

    def create_bucket_if_not_exists(self, bucket: str) -> None:
        self._require_writable("create bucket")
        self.conn.execute(
            f"CREATE TABLE IF NOT EXISTS {self._table(bucket)} "
            "(key TEXT PRIMARY KEY, value BLOB NOT NULL)"
        )

    def has_bucket(self, bucket: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (f"bucket_{bucket}",),
        ).fetchone()
        return row is not None

    def get(self, bucket: str, key: str) -> Optional[bytes]:
        row = self.conn.execute(
            f"SELECT value FROM {self._table(bucket)} WHERE key = ?", (key,)
        ).fetchone()
        return bytes(row[0]) if row else None

    def put(self, bucket: str, key: str, value: bytes) -> None:
        self._require_writable("put")
        self.conn.execute(
            f"INSERT OR REPLACE INTO {self._table(bucket)} (key, value) VALUES (?, ?)",
            (key, sqlite3.Binary(value)),
        )

    def keys(self, bucket: str) -> List[str]:
        return [row[0] for row in self.conn.execute(f"SELECT key FROM {self._table(bucket)}")]


class SQLiteInfoStore(InfoStore):
    """Metadata store backed by an SQLite database file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Transactions are managed explicitly below.
            self._conn = sqlite3.connect(str(self.path), isolation_level=None)
        except (OSError, sqlite3.Error) as e:
            raise StoreTransactionError(f"open of {self.path}", e) from e

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[Transaction]:
        operation = "write" if write else "read"
        try:
            self._conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
        except sqlite3.Error as e:
            raise StoreTransactionError(operation, e) from e

        try:
            yield _SQLiteTransaction(self._conn, writable=write)
        except sqlite3.Error as e:
            self._rollback()
            raise StoreTransactionError(operation, e) from e
        except BaseException:
            self._rollback()
            raise

        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback()
            raise StoreTransactionError(f"{operation} commit", e) from e

    def close(self) -> None:
        self._conn.close()

    def _rollback(self) -> None:
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")
