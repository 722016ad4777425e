"""Helpers shared by the bfm commands."""

from ..brew.store import SQLiteInfoStore
from ..config import get_setting


def setting(ctx_obj, name: str):
    """Value given on the command line, else the configured one."""
    value = (ctx_obj or {}).get(name)
    return value if value else get_setting(name)


def open_store(ctx_obj) -> SQLiteInfoStore:
    """Open the metadata cache configured for this invocation."""
    return SQLiteInfoStore(setting(ctx_obj, "db"))
