"""Fetch package metadata from the external query command.

The command (``brew info --json=v1 --installed`` by default) must print a
JSON array of package objects. Execution goes through a runner so tests can
substitute fixed output for a real Homebrew installation.
"""

import json
import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

from .errors import FetchError
from .info import PackageInfo
from .store import InfoStore


DEFAULT_QUERY_COMMAND = "brew info --json=v1 --installed"


class CommandRunner(ABC):
    """Runs a command and returns its standard output."""

    @abstractmethod
    def run(self, command: Sequence[str]) -> bytes:
        raise NotImplementedError


class SubprocessRunner(CommandRunner):
    """Runs the command as a child process and waits for it to finish."""

    def run(self, command: Sequence[str]) -> bytes:
        try:
            result = subprocess.run(list(command), capture_output=True, check=False)
        except OSError as e:
            raise FetchError(f"Could not run '{shlex.join(command)}': {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            message = f"'{shlex.join(command)}' exited with status {result.returncode}"
            if stderr:
                message += f": {stderr}"
            raise FetchError(message)
        return result.stdout


class InfoCache:
    """An in-memory collection of fetched records.

    Holds the records from the most recent fetch (or from a snapshot file)
    without touching the persistent store.
    """

    def __init__(self, records: Optional[Iterable[PackageInfo]] = None):
        self.records: List[PackageInfo] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def find(self, full_name: str) -> Optional[PackageInfo]:
        for info in self.records:
            if info.full_name == full_name:
                return info
        return None

    def read(self, path: Union[str, Path]) -> None:
        """Replace the collection with the records saved at ``path``.

        Raises:
            FetchError: If the file is missing or does not hold a package array
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FetchError(f"Could not read metadata snapshot {path}: {e}") from e
        self.records = parse_info(data, source=str(path))

    def write(self, path: Union[str, Path]) -> None:
        """Save the collection as a snapshot ``read`` can load."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [info.to_dict() for info in self.records]
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def parse_info(data: Union[bytes, str], source: str = "query output") -> List[PackageInfo]:
    """Decode a JSON array of package objects.

    Raises:
        FetchError: If ``data`` is not valid JSON or not an array of packages
    """
    try:
        decoded: Any = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FetchError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(decoded, list):
        raise FetchError(f"Expected a JSON array in {source}, got {type(decoded).__name__}")

    try:
        return [PackageInfo.from_dict(item) for item in decoded]
    except (AttributeError, TypeError, ValueError) as e:
        raise FetchError(f"Invalid package object in {source}: {e}") from e


def store_records(store: InfoStore, records: Iterable[PackageInfo]) -> int:
    """Write records into the store, one transaction per record.

    The bucket is created first in its own transaction. A failure part way
    through leaves earlier records committed and later ones untouched.

    Returns:
        int: Number of records written
    """
    store.ensure_bucket()
    count = 0
    for info in records:
        store.put_info(info)
        count += 1
    return count


def refresh(
    store: InfoStore,
    command: Union[str, Sequence[str]] = DEFAULT_QUERY_COMMAND,
    runner: Optional[CommandRunner] = None,
) -> InfoCache:
    """Run the query command and write every returned record into the store.

    Args:
        store: Store to update
        command: Command line as a string or argument list
        runner: Runner used to execute the command; defaults to a subprocess

    Returns:
        InfoCache: The records that were fetched

    Raises:
        FetchError: If the command fails or its output cannot be decoded
        StoreTransactionError: If a store write fails
    """
    if isinstance(command, str):
        command = shlex.split(command)
    if not command:
        raise FetchError("No query command configured")

    runner = runner or SubprocessRunner()
    output = runner.run(command)
    cache = InfoCache(parse_info(output))
    store_records(store, cache)
    return cache


def read_snapshot(path: Union[str, Path]) -> InfoCache:
    """Load a snapshot saved by a previous refresh."""
    cache = InfoCache()
    cache.read(path)
    return cache


def find(store: InfoStore, full_name: str) -> PackageInfo:
    """Point lookup; raises ``PackageNotFoundError`` when the key is absent."""
    return store.find(full_name)
