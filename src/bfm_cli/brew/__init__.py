"""Homebrew metadata cache and dependency resolution for bfm."""

from .entry import Entry, RestartService, format_entries
from .errors import (
    BfmError, BrewfileError, FetchError, PackageNotFoundError, StoreTransactionError
)
from .fetcher import (
    CommandRunner, InfoCache, SubprocessRunner, find, read_snapshot, refresh, store_records
)
from .info import PackageInfo
from .resolver import DependencyResolver, ExpansionPolicy
from .store import BUCKET, InfoStore, MemoryInfoStore, SQLiteInfoStore

__all__ = [
    'Entry',
    'RestartService',
    'format_entries',
    'BfmError',
    'BrewfileError',
    'FetchError',
    'PackageNotFoundError',
    'StoreTransactionError',
    'CommandRunner',
    'InfoCache',
    'SubprocessRunner',
    'find',
    'read_snapshot',
    'refresh',
    'store_records',
    'PackageInfo',
    'DependencyResolver',
    'ExpansionPolicy',
    'BUCKET',
    'InfoStore',
    'MemoryInfoStore',
    'SQLiteInfoStore',
]
