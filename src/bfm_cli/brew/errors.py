"""Error types raised by the metadata cache and dependency resolver."""


class BfmError(Exception):
    """Base class for errors surfaced to the user."""


class FetchError(BfmError):
    """The query command failed or produced output that could not be decoded."""


class PackageNotFoundError(BfmError):
    """A package has no record in the metadata cache."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Could not find info for '{name}' in the cache. "
            "Run 'bfm refresh' to update the cache and try again."
        )


class StoreTransactionError(BfmError):
    """Wraps a backend failure with the store operation that triggered it."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Cache {operation} failed: {cause}")


class BrewfileError(BfmError):
    """The Brewfile could not be read, or a requested change is invalid."""
