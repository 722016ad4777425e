"""bfm add command."""

import sys
from typing import Iterable, List, Optional

import click

from ..brew.entry import Entry, RestartService, invalid_arg
from ..brew.errors import BfmError, BrewfileError
from ..brew.resolver import DependencyResolver, ExpansionPolicy
from ..brew.store import InfoStore
from ..brewfile.packages import (
    Packages, construct_base_entry, construct_mas_entry, has_correct_tap_format
)
from ..utils.console import _rich_error, _rich_info, _rich_success
from ._store import open_store, setting


def split_args(values: Iterable[str]) -> List[str]:
    """Flatten repeated, comma-separated ``--args`` values.

    Raises:
        BrewfileError: If an arg contains a quote, a closing bracket or a backslash
    """
    args: List[str] = []
    for value in values:
        args.extend(part.strip() for part in value.split(",") if part.strip())
    for arg in args:
        if invalid_arg(arg):
            raise BrewfileError(f"Invalid arg {arg!r}: args cannot contain ', ] or \\.")
    return args


def add_brew_package(
    packages: Packages,
    store: InfoStore,
    name: str,
    restart_service: Optional[str] = None,
    args: Optional[List[str]] = None,
    policy: ExpansionPolicy = ExpansionPolicy.PACKAGE_ONLY,
) -> List[str]:
    """Add a formula, and per ``policy`` its dependencies, to ``packages.brew``.

    ``packages`` is only modified once resolution has succeeded.

    Returns:
        List[str]: Dependencies that were added alongside the package

    Raises:
        BrewfileError: If the restart mode or an existing line is invalid
        PackageNotFoundError: If a package to expand is missing from the cache
    """
    try:
        restart = RestartService.from_flag(restart_service)
    except ValueError as e:
        raise BrewfileError(str(e)) from e

    resolver = DependencyResolver(store)
    try:
        resolver.from_packages(packages.brew)
    except ValueError as e:
        raise BrewfileError(f"Invalid brew entry in Brewfile: {e}") from e

    added = resolver.add(Entry(name=name, restart_service=restart, args=list(args or [])), policy)
    packages.brew = resolver.lines()
    return added


def add_package(
    packages: Packages,
    package_type: str,
    name: str,
    mas_id: Optional[str] = None,
) -> None:
    """Add a tap, cask or mas app line to ``packages``.

    Raises:
        BrewfileError: On a duplicate entry, a malformed tap or a missing mas id
    """
    if packages.has_entry(package_type, name):
        raise BrewfileError(f"{package_type} '{name}' is already in the Brewfile.")

    if package_type == "tap":
        if not has_correct_tap_format(name):
            raise BrewfileError("Unrecognised tap format. Use the format 'user/repo'.")
        line = construct_base_entry(package_type, name)
    elif package_type == "mas":
        if not mas_id:
            raise BrewfileError(
                f"An id is required for mas apps. Get the id with 'mas search {name}' and try again."
            )
        line = construct_mas_entry(name, mas_id)
    else:
        line = construct_base_entry(package_type, name)

    section = packages.section(package_type)
    section.append(line)
    section.sort()


def _package_type(tap: bool, brew: bool, cask: bool, mas: bool) -> str:
    selected = [t for t, flag in (("tap", tap), ("brew", brew), ("cask", cask), ("mas", mas)) if flag]
    if not selected:
        raise BrewfileError("A package type must be specified. See 'bfm add --help'.")
    if len(selected) > 1:
        raise BrewfileError("Only one package type can be specified at a time.")
    return selected[0]


@click.command(help="➕ Add a dependency to your Brewfile")
@click.argument("name")
@click.option("--dry-run", "-d", is_flag=True, help="Print the result without modifying the Brewfile")
@click.option("--tap", "-t", is_flag=True, help="Add a tap")
@click.option("--brew", "-b", is_flag=True, help="Add a brew package")
@click.option("--cask", "-c", is_flag=True, help="Add a cask")
@click.option("--mas", "-m", is_flag=True, help="Add a mas app")
@click.option("--args", "args_", multiple=True,
              help="Args used during installations and updates (comma-separated)")
@click.option("--restart-service", default="",
              help="always (every time bundle runs), changed (after changes and updates)")
@click.option("--mas-id", "-i", default="", help="Id required for mas packages")
@click.option("--required", "-r", is_flag=True, help="Add the package and all required dependencies")
@click.option("--all", "-a", "all_deps", is_flag=True,
              help="Add the package and all required, recommended, optional and build dependencies")
@click.pass_context
def add(ctx, name, dry_run, tap, brew, cask, mas, args_, restart_service, mas_id, required, all_deps):
    """Add NAME to the Brewfile.

    The Brewfile is rewritten in place without a backup; use --dry-run
    to preview the result.

    \b
    Examples:
        bfm add -t homebrew/dupes
        bfm add -b vim --args HEAD,with-override-system-vi
        bfm add -b crisidev/chunkwm/chunkwm --restart-service changed
        bfm add -b vim --required
        bfm add -c macvim
        bfm add -m Xcode -i 497799835
    """
    try:
        package_type = _package_type(tap, brew, cask, mas)
        added: List[str] = []
        brewfile_path = setting(ctx.obj, "brewfile")
        packages = Packages.from_brewfile(brewfile_path)

        if package_type == "brew":
            policy = ExpansionPolicy.from_flags(required=required, all_deps=all_deps)
            with open_store(ctx.obj) as store:
                added = add_brew_package(
                    packages, store, name,
                    restart_service=restart_service,
                    args=split_args(args_),
                    policy=policy,
                )
        else:
            add_package(packages, package_type, name, mas_id=mas_id)

        if dry_run:
            click.echo(packages.to_text())
            return

        packages.write(brewfile_path)
        for dep in added:
            _rich_info(f"Added dependency brew {dep}")
        _rich_success(f"Added {package_type} {name} to Brewfile.")
    except BfmError as e:
        _rich_error(str(e))
        sys.exit(1)
