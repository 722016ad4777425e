"""Command-line interface for bfm."""

import click

from . import __version__
from .commands.add import add
from .commands.clean import clean
from .commands.info import info
from .commands.refresh import refresh


@click.group(help="Keep your Brewfile in sync with Homebrew package metadata")
@click.version_option(version=__version__, prog_name="bfm")
@click.option("--brewfile", type=click.Path(dir_okay=False), default=None,
              help="Path to the Brewfile (default: ~/Brewfile)")
@click.option("--db", type=click.Path(dir_okay=False), default=None,
              help="Path to the package metadata cache")
@click.pass_context
def cli(ctx, brewfile, db):
    """bfm command group. Unset paths fall back to the user config."""
    ctx.ensure_object(dict)
    if brewfile:
        ctx.obj["brewfile"] = brewfile
    if db:
        ctx.obj["db"] = db


cli.add_command(add)
cli.add_command(refresh)
cli.add_command(clean)
cli.add_command(info)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
