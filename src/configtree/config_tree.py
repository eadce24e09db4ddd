"""Config tree property source: one property per file under a directory.

The directory is scanned once when the source is created. It is not
monitored, so files should not be added or removed afterwards; their
contents may change and are picked up only with ``Option.ALWAYS_READ``.
Nested directories use ``.`` instead of ``/`` in property names. Typical
input is a Kubernetes ``configMap`` volume mount.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from configtree.options import OptionSet
from configtree.scanner import scan_tree
from configtree.values import PropertyFile

if TYPE_CHECKING:
    from collections.abc import Mapping

    from configtree.types import OptionsInput
    from configtree.values import Origin, Value


class ConfigTreeSource:
    """Flat property source backed by a directory tree."""

    def __init__(
        self, name: str, root: str | Path, options: OptionsInput = None
    ) -> None:
        """Scan *root* and build one ``PropertyFile`` per entry.

        Raises:
            RootNotADirectoryError: If *root* exists but is not a directory.
            SourceUnreadableError: If the tree cannot be listed.
        """
        self.name = name
        self.root = Path(root)
        self.options = OptionSet.coerce(options)
        self._files: Mapping[str, PropertyFile] = MappingProxyType(
            {
                key: PropertyFile(path, self.options)
                for key, path in scan_tree(self.root, self.options).items()
            }
        )
        self._names = tuple(self._files)

    def list_names(self) -> tuple[str, ...]:
        return self._names

    def get_value(self, name: str) -> Value | None:
        pf = self._files.get(self.options.fold(name))
        return pf.content() if pf is not None else None

    def get_origin(self, name: str) -> Origin | None:
        pf = self._files.get(self.options.fold(name))
        return pf.origin if pf is not None else None

    def is_immutable(self) -> bool:
        """Return True when values are cached and snapshots are safe to keep."""
        return not self.options.always_read

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.options.fold(name) in self._files

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return (
            f"ConfigTreeSource(name={self.name!r}, root={str(self.root)!r}, "
            f"options={self.options}, properties={len(self)})"
        )
