"""Reading and writing Brewfiles.

A Brewfile is split into four sections, written in this order:

    tap 'homebrew/bundle'

    brew 'a2ps'

    cask 'firefox'

    mas 'Xcode', id: 497799835

Comments and any other lines are not preserved when the file is rewritten.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from ..brew.errors import BrewfileError


PACKAGE_TYPES = ("tap", "brew", "cask", "mas")

_TAP_RE = re.compile(r".+/.+")


def construct_base_entry(package_type: str, name: str) -> str:
    """Return the ``<type> '<name>'`` prefix of a Brewfile line."""
    return f"{package_type} '{name}'"


def construct_mas_entry(name: str, mas_id: str) -> str:
    return f"{construct_base_entry('mas', name)}, id: {mas_id}"


def has_correct_tap_format(tap: str) -> bool:
    return _TAP_RE.fullmatch(tap) is not None


def line_type(line: str) -> str:
    """Return the package type of a line, or '' for anything else."""
    head = line.strip().split(" ", 1)[0]
    return head if head in PACKAGE_TYPES else ""


def line_name(line: str) -> str:
    """Return the quoted package name of a line, or ''."""
    match = re.search(r"'([^']*)'", line)
    return match.group(1) if match else ""


@dataclass
class Packages:
    """The entries of a Brewfile, one list of lines per section."""

    tap: List[str] = field(default_factory=list)
    brew: List[str] = field(default_factory=list)
    cask: List[str] = field(default_factory=list)
    mas: List[str] = field(default_factory=list)

    def section(self, package_type: str) -> List[str]:
        if package_type not in PACKAGE_TYPES:
            raise BrewfileError(f"Unknown package type: {package_type}")
        return getattr(self, package_type)

    def names(self, package_type: str) -> List[str]:
        return [line_name(line) for line in self.section(package_type)]

    def has_entry(self, package_type: str, name: str) -> bool:
        return name in self.names(package_type)

    def sort(self) -> None:
        for package_type in PACKAGE_TYPES:
            self.section(package_type).sort()

    @classmethod
    def from_text(cls, text: str) -> "Packages":
        """Split Brewfile text into sections, each sorted."""
        packages = cls()
        for raw in text.splitlines():
            line = raw.strip()
            package_type = line_type(line)
            if package_type:
                packages.section(package_type).append(line)
        packages.sort()
        return packages

    @classmethod
    def from_brewfile(cls, path: Union[str, Path]) -> "Packages":
        """Read a Brewfile.

        Raises:
            BrewfileError: If the file cannot be read
        """
        path = Path(path)
        try:
            return cls.from_text(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise BrewfileError(f"Could not read Brewfile {path}: {e}") from e

    def to_text(self) -> str:
        """Render non-empty sections separated by a blank line."""
        sections = [
            "\n".join(self.section(package_type))
            for package_type in PACKAGE_TYPES
            if self.section(package_type)
        ]
        return "\n\n".join(sections)

    def write(self, path: Union[str, Path]) -> None:
        path = Path(path)
        try:
            path.write_text(self.to_text() + "\n", encoding="utf-8")
        except OSError as e:
            raise BrewfileError(f"Could not write Brewfile {path}: {e}") from e
