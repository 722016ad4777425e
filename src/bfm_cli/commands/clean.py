"""bfm clean command."""

import sys

import click

from ..brew.errors import BfmError
from ..brew.store import InfoStore
from ..brewfile.packages import Packages, line_name
from ..utils.console import _rich_error, _rich_success
from ._store import open_store, setting


def check_brew_entries(packages: Packages, store: InfoStore) -> None:
    """Make sure every brew entry in ``packages`` has cached metadata.

    Raises:
        PackageNotFoundError: For the first entry missing from the cache
    """
    for line in packages.brew:
        store.find(line_name(line))


@click.command(help="🧹 Sort and tidy the Brewfile")
@click.option("--dry-run", "-d", is_flag=True, help="Print the result without modifying the Brewfile")
@click.pass_context
def clean(ctx, dry_run):
    """Rewrite the Brewfile in sorted tap, brew, cask and mas sections.

    Comments and unrecognised lines are dropped. Fails without touching the
    file if a brew package is not in the cache.
    """
    try:
        brewfile_path = setting(ctx.obj, "brewfile")
        packages = Packages.from_brewfile(brewfile_path)
        with open_store(ctx.obj) as store:
            check_brew_entries(packages, store)

        if dry_run:
            click.echo(packages.to_text())
            return

        packages.write(brewfile_path)
        _rich_success(f"Cleaned {brewfile_path}.")
    except BfmError as e:
        _rich_error(str(e))
        sys.exit(1)
