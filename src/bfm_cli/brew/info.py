"""Package metadata records as reported by ``brew info --json=v1``.

A record is decoded from the query command's JSON output, stored in the
metadata cache as JSON, and decoded again on lookup. Unknown fields are
ignored and missing fields fall back to empty values, so records written by an
older Homebrew still load.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence


# Keys of the four dependency-name lists, in traversal order.
REQUIRED = "dependencies"
RECOMMENDED = "recommended_dependencies"
OPTIONAL = "optional_dependencies"
BUILD = "build_dependencies"

DEPENDENCY_KINDS = (REQUIRED, RECOMMENDED, OPTIONAL, BUILD)


def _object(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Return ``data[key]`` as an object, or {} when missing or null."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    """Return ``data[key]`` as a list, or [] when missing or null."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return list(value)


def _names(data: Dict[str, Any], key: str) -> List[str]:
    """Return ``data[key]`` as a list of strings."""
    values = _list(data, key)
    for value in values:
        if not isinstance(value, str):
            raise ValueError(f"'{key}' must hold strings, got {type(value).__name__}")
    return values


def _objects(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    values = _list(data, key)
    for value in values:
        if not isinstance(value, dict):
            raise ValueError(f"'{key}' must hold objects, got {type(value).__name__}")
    return values


@dataclass
class Versions:
    stable: Optional[str] = None
    bottle: bool = False
    devel: Optional[str] = None
    head: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Versions":
        return cls(
            stable=data.get("stable"),
            bottle=bool(data.get("bottle", False)),
            devel=data.get("devel"),
            head=data.get("head"),
        )


@dataclass
class RuntimeDependency:
    full_name: str
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuntimeDependency":
        return cls(full_name=data.get("full_name", ""), version=data.get("version"))


@dataclass
class InstalledVersion:
    """One installed keg of a formula."""

    version: str
    used_options: List[str] = field(default_factory=list)
    built_as_bottle: bool = False
    poured_from_bottle: bool = False
    runtime_dependencies: List[RuntimeDependency] = field(default_factory=list)
    installed_as_dependency: bool = False
    installed_on_request: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstalledVersion":
        return cls(
            version=data.get("version", ""),
            used_options=_names(data, "used_options"),
            built_as_bottle=bool(data.get("built_as_bottle", False)),
            poured_from_bottle=bool(data.get("poured_from_bottle", False)),
            runtime_dependencies=[
                RuntimeDependency.from_dict(d) for d in _objects(data, "runtime_dependencies")
            ],
            installed_as_dependency=bool(data.get("installed_as_dependency", False)),
            installed_on_request=bool(data.get("installed_on_request", False)),
        )


@dataclass
class Requirement:
    name: str
    default_formula: Optional[str] = None
    cask: Optional[str] = None
    download: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Requirement":
        return cls(
            name=data.get("name", ""),
            default_formula=data.get("default_formula"),
            cask=data.get("cask"),
            download=data.get("download"),
        )


@dataclass
class Option:
    option: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Option":
        return cls(option=data.get("option", ""), description=data.get("description") or "")


@dataclass
class BottleFile:
    url: str
    sha256: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BottleFile":
        return cls(url=data.get("url", ""), sha256=data.get("sha256", ""))


@dataclass
class Bottle:
    """Stable bottle details; ``files`` maps a platform tag to its download."""

    rebuild: int = 0
    cellar: Optional[str] = None
    prefix: Optional[str] = None
    root_url: Optional[str] = None
    files: Dict[str, BottleFile] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bottle":
        stable = _object(data, "stable")
        return cls(
            rebuild=int(stable.get("rebuild") or 0),
            cellar=stable.get("cellar"),
            prefix=stable.get("prefix"),
            root_url=stable.get("root_url"),
            files={
                platform: BottleFile.from_dict(f)
                for platform, f in _object(stable, "files").items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        if self == Bottle():
            return {}
        return {"stable": asdict(self)}


@dataclass
class PackageInfo:
    """Metadata for a single formula, keyed by ``full_name``."""

    name: str
    full_name: str
    desc: Optional[str] = None
    homepage: Optional[str] = None
    oldname: Optional[str] = None
    aliases: List[str] = field(default_factory=list)
    versions: Versions = field(default_factory=Versions)
    revision: int = 0
    version_scheme: int = 0
    installed: List[InstalledVersion] = field(default_factory=list)
    linked_keg: Optional[str] = None
    pinned: bool = False
    outdated: bool = False
    keg_only: bool = False
    dependencies: List[str] = field(default_factory=list)
    recommended_dependencies: List[str] = field(default_factory=list)
    optional_dependencies: List[str] = field(default_factory=list)
    build_dependencies: List[str] = field(default_factory=list)
    conflicts_with: List[str] = field(default_factory=list)
    caveats: Optional[str] = None
    requirements: List[Requirement] = field(default_factory=list)
    options: List[Option] = field(default_factory=list)
    bottle: Bottle = field(default_factory=Bottle)

    def dependency_names(self, kinds: Sequence[str]) -> List[str]:
        """Return the dependency names of the given kinds, in kind order.

        Args:
            kinds: Any of ``DEPENDENCY_KINDS``

        Returns:
            List[str]: Names as listed upstream; may contain duplicates across kinds
        """
        names: List[str] = []
        for kind in kinds:
            if kind not in DEPENDENCY_KINDS:
                raise ValueError(f"Unknown dependency kind: {kind}")
            names.extend(getattr(self, kind))
        return names

    @property
    def is_installed(self) -> bool:
        return bool(self.installed)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the upstream JSON field names."""
        result = asdict(self)
        result["bottle"] = self.bottle.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageInfo":
        """Decode one element of the query command's JSON array.

        Raises:
            ValueError: If ``data`` is not an object or has no usable name
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a package object, got {type(data).__name__}")
        name = data.get("name")
        full_name = data.get("full_name") or name
        if not full_name:
            raise ValueError("Package object is missing 'full_name'")
        return cls(
            name=name or full_name,
            full_name=full_name,
            desc=data.get("desc"),
            homepage=data.get("homepage"),
            oldname=data.get("oldname"),
            aliases=_names(data, "aliases"),
            versions=Versions.from_dict(_object(data, "versions")),
            revision=int(data.get("revision") or 0),
            version_scheme=int(data.get("version_scheme") or 0),
            installed=[InstalledVersion.from_dict(i) for i in _objects(data, "installed")],
            linked_keg=data.get("linked_keg"),
            pinned=bool(data.get("pinned", False)),
            outdated=bool(data.get("outdated", False)),
            keg_only=bool(data.get("keg_only", False)),
            dependencies=_names(data, REQUIRED),
            recommended_dependencies=_names(data, RECOMMENDED),
            optional_dependencies=_names(data, OPTIONAL),
            build_dependencies=_names(data, BUILD),
            conflicts_with=_names(data, "conflicts_with"),
            caveats=data.get("caveats"),
            requirements=[Requirement.from_dict(r) for r in _objects(data, "requirements")],
            options=[Option.from_dict(o) for o in _objects(data, "options")],
            bottle=Bottle.from_dict(_object(data, "bottle")),
        )
