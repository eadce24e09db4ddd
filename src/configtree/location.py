"""Location resolution: turn ``prefix:path`` expressions into concrete roots.

Grammar::

    [optional:]bindings:[<path>/]
    [optional:]configtree:<path>/

A path containing ``*`` is a pattern and expands to every matching
subdirectory; otherwise exactly one resource is produced and its existence
is checked only when it is loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final, Literal, Protocol

from configtree.errors import LocationFormatError
from configtree.scanner import list_subdirectories

if TYPE_CHECKING:
    from collections.abc import Callable

    from configtree.config import Config

log = logging.getLogger(__name__)

OPTIONAL_PREFIX: Final[str] = "optional:"
BINDINGS_PREFIX: Final[str] = "bindings:"
CONFIG_TREE_PREFIX: Final[str] = "configtree:"
SEPARATOR: Final[str] = "/"

ResourceKind = Literal["bindings", "configtree"]


@dataclass(frozen=True)
class ConfigLocation:
    """A parsed location expression."""

    value: str
    optional: bool = False

    @classmethod
    def parse(cls, text: str) -> ConfigLocation:
        text = text.strip()
        if text.startswith(OPTIONAL_PREFIX):
            return cls(text[len(OPTIONAL_PREFIX) :], optional=True)
        return cls(text)

    def has_prefix(self, prefix: str) -> bool:
        return self.value.startswith(prefix)

    def non_prefixed(self, prefix: str) -> str:
        return self.value[len(prefix) :] if self.has_prefix(prefix) else self.value

    def __str__(self) -> str:
        return f"{OPTIONAL_PREFIX}{self.value}" if self.optional else self.value


@dataclass(frozen=True)
class ConfigResource:
    """A concrete root produced by resolving a location."""

    kind: ResourceKind
    path: Path
    optional: bool = False

    def exists(self) -> bool:
        return self.path.exists()

    def __str__(self) -> str:
        return f"{self.kind} [{self.path}]"


class LocationResolver(Protocol):
    """Resolves locations that start with ``prefix``."""

    prefix: str

    def is_resolvable(self, location: ConfigLocation) -> bool: ...

    def resolve(self, location: ConfigLocation) -> list[ConfigResource]: ...


def is_pattern(path: str) -> bool:
    return "*" in path


def list_directories(parent: Path) -> list[Path]:
    """Default directory-listing capability; a missing parent lists nothing."""
    if not parent.is_dir():
        return []
    return list_subdirectories(parent)


def expand_pattern(
    location: ConfigLocation,
    path: str,
    lister: Callable[[Path], list[Path]] = list_directories,
) -> list[Path]:
    """Expand a ``.../prefix*suffix/`` pattern into matching directories.

    Raises:
        LocationFormatError: If the pattern has more than one ``*`` or the
            wildcard is not in the final segment.
    """
    if path.count("*") != 1:
        raise LocationFormatError(
            str(location), "cannot contain multiple wildcards", hint="Use one '*'."
        )
    stripped = path.rstrip(SEPARATOR)
    parent, _, segment = stripped.rpartition(SEPARATOR)
    if "*" not in segment:
        raise LocationFormatError(
            str(location),
            "must have its wildcard in the final path segment",
            hint="Use a location such as 'bindings:/bindings/*/'.",
        )
    if parent:
        parent_path = Path(parent)
    else:
        parent_path = Path(SEPARATOR if stripped.startswith(SEPARATOR) else ".")
    matches = [p for p in lister(parent_path) if fnmatchcase(p.name, segment)]
    log.debug("Expanded %s to %d directories", location, len(matches))
    return sorted(matches)


def _resolve_path(
    location: ConfigLocation,
    kind: ResourceKind,
    path: str,
    lister: Callable[[Path], list[Path]],
) -> list[ConfigResource]:
    if not path.endswith(SEPARATOR):
        raise LocationFormatError(
            str(location),
            f"must end with '{SEPARATOR}'",
            hint=f"Use '{location.value}{SEPARATOR}'.",
        )
    if not is_pattern(path):
        return [ConfigResource(kind, Path(path), optional=location.optional)]
    return [
        ConfigResource(kind, p, optional=location.optional)
        for p in expand_pattern(location, path, lister)
    ]


class BindingLocationResolver:
    """Resolves ``bindings:`` locations, falling back to the environment."""

    prefix = BINDINGS_PREFIX

    def __init__(
        self,
        config: Config,
        lister: Callable[[Path], list[Path]] = list_directories,
    ) -> None:
        self._config = config
        self._lister = lister

    def is_resolvable(self, location: ConfigLocation) -> bool:
        return location.has_prefix(self.prefix)

    def resolve(self, location: ConfigLocation) -> list[ConfigResource]:
        """Resolve to one or more binding roots.

        Raises:
            LocationFormatError: If no path can be determined or the path
                does not end with a separator.
        """
        path = location.non_prefixed(self.prefix)
        if not path:
            fallback = self._config.binding_root_fallback()
            if not fallback:
                env = self._config.binding_root_env
                raise LocationFormatError(
                    str(location),
                    f"has no path and ${env} is not set",
                    hint=f"Set {env} or use 'bindings:/path/to/bindings/'.",
                )
            path = fallback if fallback.endswith(SEPARATOR) else fallback + SEPARATOR
        return _resolve_path(location, "bindings", path, self._lister)


class ConfigTreeLocationResolver:
    """Resolves ``configtree:`` locations."""

    prefix = CONFIG_TREE_PREFIX

    def __init__(
        self,
        lister: Callable[[Path], list[Path]] = list_directories,
    ) -> None:
        self._lister = lister

    def is_resolvable(self, location: ConfigLocation) -> bool:
        return location.has_prefix(self.prefix)

    def resolve(self, location: ConfigLocation) -> list[ConfigResource]:
        """Resolve to one or more config tree roots.

        Raises:
            LocationFormatError: If the path is empty or does not end with a
                separator.
        """
        path = location.non_prefixed(self.prefix)
        if not path:
            raise LocationFormatError(
                str(location),
                "has no path",
                hint="Use 'configtree:/path/to/config/'.",
            )
        return _resolve_path(location, "configtree", path, self._lister)
