"""Resolve the ``brew`` entries of a Brewfile against the metadata cache.

``DependencyResolver`` keeps a map of full name -> ``Entry`` for one ``add``
operation. Adding a package can pull in its dependencies, depending on the
``ExpansionPolicy``:

- ``PACKAGE_ONLY``: just the package
- ``PACKAGE_AND_REQUIRED``: the package and its required dependencies,
  transitively
- ``ALL``: required, recommended, optional and build dependencies,
  transitively

A name already in the map is never expanded again, which keeps dependency
cycles and diamonds from producing duplicates or looping.
"""

from collections import deque
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from .entry import Entry, format_entries
from .info import BUILD, OPTIONAL, RECOMMENDED, REQUIRED
from .store import InfoStore


class ExpansionPolicy(Enum):
    PACKAGE_ONLY = "package-only"
    PACKAGE_AND_REQUIRED = "required"
    ALL = "all"

    @property
    def dependency_kinds(self) -> Tuple[str, ...]:
        """Dependency lists followed under this policy."""
        if self is ExpansionPolicy.PACKAGE_AND_REQUIRED:
            return (REQUIRED,)
        if self is ExpansionPolicy.ALL:
            return (REQUIRED, RECOMMENDED, OPTIONAL, BUILD)
        return ()

    @classmethod
    def from_flags(cls, required: bool = False, all_deps: bool = False) -> "ExpansionPolicy":
        """Pick the policy for the ``--required``/``--all`` flags; ``--all`` wins."""
        if all_deps:
            return cls.ALL
        if required:
            return cls.PACKAGE_AND_REQUIRED
        return cls.PACKAGE_ONLY


class DependencyResolver:
    """Builds the set of ``brew`` entries for a Brewfile.

    Attributes:
        store: Metadata store used for dependency lookups
        entries: Full name -> entry, one per package
    """

    def __init__(self, store: InfoStore):
        self.store = store
        self.entries: Dict[str, Entry] = {}

    def from_packages(self, lines: Iterable[str]) -> None:
        """Seed the map with the packages already in the Brewfile.

        Lines may be full ``brew`` lines or bare names. The cache is not
        consulted here; existing packages are only looked up if a later
        ``add`` expands them.

        Raises:
            ValueError: If a line is not a brew entry
        """
        for line in lines:
            entry = Entry.parse(line)
            self.entries[entry.name] = entry

    def add(self, entry: Entry, policy: ExpansionPolicy = ExpansionPolicy.PACKAGE_ONLY) -> List[str]:
        """Add ``entry`` and, per ``policy``, its dependencies.

        The requested entry replaces any existing entry of the same name.
        Dependencies are added as bare entries only when absent, so an
        entry added earlier keeps its args and restart mode.

        Returns:
            List[str]: Names newly added as dependencies, in visit order

        Raises:
            PackageNotFoundError: If a visited package is missing from the
                cache. The map is left unchanged.
        """
        kinds = policy.dependency_kinds
        added: Dict[str, Entry] = {}

        if kinds:
            known = set(self.entries)
            known.add(entry.name)
            pending = deque([entry.name])
            while pending:
                info = self.store.find(pending.popleft())
                for dep in info.dependency_names(kinds):
                    if dep in known:
                        continue
                    known.add(dep)
                    added[dep] = Entry(name=dep)
                    pending.append(dep)

        self.entries[entry.name] = entry
        self.entries.update(added)
        return list(added)

    def lines(self) -> List[str]:
        """Formatted ``brew`` lines in sorted order."""
        return format_entries(self.entries.values())
