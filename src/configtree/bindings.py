"""Service binding property source.

Maps a directory of service bindings (the Kubernetes service binding
specification layout) to properties named ``<binding>.<property>``::

    <root>/<binding>/type        required metadata
    <root>/<binding>/provider    optional metadata
    <root>/<binding>/<property>  any number of values
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from configtree.errors import (
    AccessError,
    MetadataUnreadableError,
    MissingRequiredFieldError,
)
from configtree.options import OptionSet
from configtree.scanner import check_root, list_entries, list_subdirectories
from configtree.values import PropertyFile

if TYPE_CHECKING:
    from collections.abc import Iterator

    from configtree.types import OptionsInput
    from configtree.values import Origin, Value

log = logging.getLogger(__name__)

TYPE: Final[str] = "type"
PROVIDER: Final[str] = "provider"


def _read_metadata(binding: Path, pf: PropertyFile, entry: str) -> str:
    try:
        return pf.content().as_text()
    except AccessError as exc:
        raise MetadataUnreadableError(binding, entry) from exc


@dataclass(frozen=True)
class ServiceBinding:
    """A single binding: one subdirectory of the bindings root."""

    name: str
    path: Path
    type: str
    provider: str | None = None
    properties: Mapping[str, PropertyFile] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_directory(cls, path: Path, options: OptionSet) -> ServiceBinding:
        """Classify the entries of a binding directory.

        ``type`` and ``provider`` are read as text and removed from the
        properties.

        Raises:
            MissingRequiredFieldError: If the directory has no ``type`` entry.
            MetadataUnreadableError: If ``type`` or ``provider`` cannot be read.
            SourceUnreadableError: If the directory cannot be listed.
        """
        binding_type: str | None = None
        provider: str | None = None
        properties: dict[str, PropertyFile] = {}
        for key, file_path in list_entries(path, options).items():
            pf = PropertyFile(file_path, options)
            if key == TYPE:
                binding_type = _read_metadata(path, pf, TYPE)
            elif key == PROVIDER:
                provider = _read_metadata(path, pf, PROVIDER)
            else:
                properties[key] = pf
        if binding_type is None:
            raise MissingRequiredFieldError(path, TYPE)
        return cls(
            name=options.fold(path.name),
            path=path,
            type=binding_type,
            provider=provider,
            properties=MappingProxyType(properties),
        )

    def __str__(self) -> str:
        return (
            f"Binding(name={self.name!r}, provider={self.provider!r}, "
            f"properties={sorted(self.properties)}, type={self.type!r})"
        )


class ServiceBindingSet(Mapping[str, ServiceBinding]):
    """Read-only mapping of binding name to binding."""

    def __init__(self, bindings: Mapping[str, ServiceBinding]) -> None:
        self._bindings = dict(sorted(bindings.items()))

    @classmethod
    def find_all(cls, root: Path, options: OptionSet) -> ServiceBindingSet:
        """Build one binding per subdirectory of *root*.

        A missing root yields an empty set.

        Raises:
            RootNotADirectoryError: If *root* exists but is not a directory.
            MissingRequiredFieldError: If a binding has no ``type``.
            SourceUnreadableError: If a directory cannot be listed.
        """
        if not check_root(root):
            log.debug("Service binding root %s does not exist", root)
            return cls({})
        found: dict[str, ServiceBinding] = {}
        for directory in list_subdirectories(root):
            binding = ServiceBinding.from_directory(directory, options)
            found[binding.name] = binding
        log.debug("Found %d service bindings in %s", len(found), root)
        return cls(found)

    def __getitem__(self, key: str) -> ServiceBinding:
        return self._bindings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def names(self) -> list[str]:
        """Return the addressable ``<binding>.<property>`` names."""
        out: list[str] = []
        for binding_name, binding in self._bindings.items():
            for property_name in sorted(binding.properties):
                if "." in binding_name or "." in property_name:
                    log.debug(
                        "Binding property %s/%s is not addressable by name",
                        binding.path,
                        property_name,
                    )
                    continue
                out.append(f"{binding_name}.{property_name}")
        return out

    def lookup(self, name: str) -> PropertyFile | None:
        """Resolve ``<binding>.<property>``; any other shape returns None."""
        parts = name.split(".")
        if len(parts) != 2:
            return None
        binding_name, property_name = parts
        binding = self._bindings.get(binding_name)
        if binding is None:
            return None
        return binding.properties.get(property_name)


class ServiceBindingSource:
    """Property source grouping a bindings root into named bindings."""

    def __init__(
        self, name: str, root: str | Path, options: OptionsInput = None
    ) -> None:
        """Scan *root* and validate every binding.

        Raises:
            RootNotADirectoryError: If *root* exists but is not a directory.
            MissingRequiredFieldError: If a binding has no ``type``.
            MetadataUnreadableError: If a binding's metadata cannot be read.
            SourceUnreadableError: If a directory cannot be listed.
        """
        self.name = name
        self.root = Path(root)
        self.options = OptionSet.coerce(options)
        self.bindings = ServiceBindingSet.find_all(self.root, self.options)
        self._names = tuple(self.bindings.names())

    def list_names(self) -> tuple[str, ...]:
        return self._names

    def _lookup(self, name: str) -> PropertyFile | None:
        return self.bindings.lookup(self.options.fold(name))

    def get_value(self, name: str) -> Value | None:
        pf = self._lookup(name)
        return pf.content() if pf is not None else None

    def get_origin(self, name: str) -> Origin | None:
        pf = self._lookup(name)
        return pf.origin if pf is not None else None

    def is_immutable(self) -> bool:
        return not self.options.always_read

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._lookup(name) is not None

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return (
            f"ServiceBindingSource(name={self.name!r}, root={str(self.root)!r}, "
            f"options={self.options}, bindings={list(self.bindings)})"
        )
