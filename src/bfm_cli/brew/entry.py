"""Brewfile ``brew`` entries and their canonical line format."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional


class RestartService(Enum):
    """Service restart behaviour written as ``restart_service:``."""

    ALWAYS = "true"
    CHANGED = ":changed"

    @classmethod
    def from_flag(cls, flag: Optional[str]) -> Optional["RestartService"]:
        """Map the ``--restart-service`` flag value to a mode.

        An empty flag means unset.

        Raises:
            ValueError: If the flag is neither 'always' nor 'changed'
        """
        if not flag:
            return None
        if flag == "always":
            return cls.ALWAYS
        if flag == "changed":
            return cls.CHANGED
        raise ValueError(
            "Valid options for the --restart-service flag are 'always' and 'changed'."
        )


_LINE_RE = re.compile(r"^\s*brew\s+'(?P<name>[^']+)'(?P<rest>.*)$")
_ARGS_RE = re.compile(r"args:\s*\[(?P<args>[^\]]*)\]")
_QUOTED_RE = re.compile(r"'([^']*)'")
_RESTART_RE = re.compile(r"restart_service:\s*(?P<mode>true|:changed)")

# Characters that cannot appear inside a single-quoted arg.
UNQUOTABLE_ARG_CHARS = ("'", "]", "\\")


def invalid_arg(arg: str) -> bool:
    return not arg or any(ch in arg for ch in UNQUOTABLE_ARG_CHARS)


@dataclass
class Entry:
    """The logical content of one ``brew`` line.

    ``line`` holds the original Brewfile text of a parsed entry. It is
    written back unchanged, so options bfm does not model survive a rewrite.
    """

    name: str
    restart_service: Optional[RestartService] = None
    args: List[str] = field(default_factory=list)
    line: Optional[str] = field(default=None, compare=False, repr=False)

    def format(self) -> str:
        """Render the entry as a Brewfile line.

        Args are written before ``restart_service``, e.g.
        ``brew 'mysql', args: ['with-test'], restart_service: :changed``.

        Raises:
            ValueError: If the entry has no name, an unquotable arg or an
                unknown restart mode
        """
        if not self.name:
            raise ValueError("Cannot format a brew entry without a name")
        if self.line is not None:
            return self.line
        for arg in self.args:
            if invalid_arg(arg):
                raise ValueError(f"Invalid brew arg: {arg!r}")
        line = f"brew '{self.name}'"
        if self.args:
            line += ", args: [" + ", ".join(f"'{arg}'" for arg in self.args) + "]"
        if self.restart_service is not None:
            if not isinstance(self.restart_service, RestartService):
                raise ValueError(f"Invalid restart mode: {self.restart_service!r}")
            line += f", restart_service: {self.restart_service.value}"
        return line

    @classmethod
    def parse(cls, line: str) -> "Entry":
        """Parse a ``brew`` line (or a bare package name) back into an entry.

        Raises:
            ValueError: If the line is a Brewfile line of another type
        """
        text = line.strip()
        match = _LINE_RE.match(text)
        if match is None:
            if not text or " " in text or "'" in text:
                raise ValueError(f"Not a brew entry: {line!r}")
            return cls(name=text)

        rest = match.group("rest")
        args: List[str] = []
        args_match = _ARGS_RE.search(rest)
        if args_match:
            args = _QUOTED_RE.findall(args_match.group("args"))

        restart = None
        restart_match = _RESTART_RE.search(rest)
        if restart_match:
            restart = RestartService(restart_match.group("mode"))

        return cls(name=match.group("name"), restart_service=restart, args=args, line=text)


def format_entries(entries: Iterable[Entry]) -> List[str]:
    """Format entries and sort the lines lexicographically."""
    return sorted(entry.format() for entry in entries)
