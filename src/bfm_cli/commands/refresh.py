"""bfm refresh command."""

import sys

import click

from ..brew.errors import BfmError
from ..brew.fetcher import read_snapshot, refresh as refresh_cache, store_records
from ..utils.console import _rich_error, _rich_info, _rich_success, _rich_warning
from ._store import open_store, setting


@click.command(help="🔄 Refresh the package metadata cache")
@click.option("--from-snapshot", is_flag=True,
              help="Load the last saved snapshot instead of querying Homebrew")
@click.pass_context
def refresh(ctx, from_snapshot):
    """Fetch package metadata and store it in the cache.

    Records are written one at a time; if the refresh fails part way, the
    records already written stay updated and the rest keep their old values.
    """
    snapshot_path = setting(ctx.obj, "snapshot")
    try:
        with open_store(ctx.obj) as store:
            if from_snapshot:
                _rich_info(f"Loading package metadata from {snapshot_path}")
                cache = read_snapshot(snapshot_path)
                count = store_records(store, cache)
            else:
                command = setting(ctx.obj, "query_command")
                _rich_info(f"Running '{command}'")
                cache = refresh_cache(store, command)
                cache.write(snapshot_path)
                count = len(cache)
        if count == 0:
            _rich_warning("No package metadata was returned; the cache is unchanged.")
            return
        _rich_success(f"Cached metadata for {count} package(s).")
    except BfmError as e:
        _rich_error(str(e))
        sys.exit(1)
    except OSError as e:
        _rich_error(f"Could not save metadata snapshot {snapshot_path}: {e}")
        sys.exit(1)
