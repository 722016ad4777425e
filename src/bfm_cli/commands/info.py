"""bfm info command."""

import sys

import click
from rich.table import Table
from rich.text import Text

from ..brew.errors import BfmError
from ..brew.info import BUILD, OPTIONAL, RECOMMENDED, REQUIRED, PackageInfo
from ..utils.console import _rich_error, console
from ._store import open_store


def build_info_table(pkg: PackageInfo) -> Table:
    """Tabulate the cached fields most useful when editing a Brewfile."""
    table = Table(title=f"📦 {pkg.full_name}", show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    installed = ", ".join(i.version for i in pkg.installed) or "-"
    rows = [
        ("Description", pkg.desc or "-"),
        ("Homepage", pkg.homepage or "-"),
        ("Stable", pkg.versions.stable or "-"),
        ("Installed", installed),
        ("Pinned", "yes" if pkg.pinned else "no"),
        ("Outdated", "yes" if pkg.outdated else "no"),
        ("Required", ", ".join(pkg.dependency_names((REQUIRED,))) or "-"),
        ("Recommended", ", ".join(pkg.dependency_names((RECOMMENDED,))) or "-"),
        ("Optional", ", ".join(pkg.dependency_names((OPTIONAL,))) or "-"),
        ("Build", ", ".join(pkg.dependency_names((BUILD,))) or "-"),
    ]
    for field_name, value in rows:
        table.add_row(field_name, Text(value))
    return table


@click.command(help="🔎 Show cached metadata for a package")
@click.argument("name")
@click.pass_context
def info(ctx, name):
    """Print the cached record for NAME."""
    try:
        with open_store(ctx.obj) as store:
            pkg = store.find(name)
        console.print(build_info_table(pkg))
    except BfmError as e:
        _rich_error(str(e))
        sys.exit(1)
