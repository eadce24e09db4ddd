"""Loading resolved locations into property sources.

``Resolvers`` is the explicit registry of location resolvers. It is built
once from a ``Config`` and handed to whoever needs to resolve locations;
nothing is registered globally.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from configtree.bindings import ServiceBindingSource
from configtree.config_tree import ConfigTreeSource
from configtree.errors import LocationFormatError, RootNotFoundError
from configtree.location import (
    BindingLocationResolver,
    ConfigLocation,
    ConfigResource,
    ConfigTreeLocationResolver,
    LocationResolver,
    list_directories,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from configtree.config import Config
    from configtree.types import PropertySource

log = logging.getLogger(__name__)


def source_name(resource: ConfigResource) -> str:
    if resource.kind == "bindings":
        return f"Service bindings '{resource.path}'"
    return f"Config tree '{resource.path}'"


def load_resource(resource: ConfigResource, config: Config) -> PropertySource | None:
    """Build the property source for a resolved resource.

    Returns None for an optional resource whose root does not exist.

    Raises:
        RootNotFoundError: If a required resource's root does not exist.
        ConstructionError: Any error raised while building the source.
    """
    if not resource.exists():
        if resource.optional:
            log.debug("Skipping optional %s: root does not exist", resource)
            return None
        raise RootNotFoundError(resource.path)
    name = source_name(resource)
    if resource.kind == "bindings":
        return ServiceBindingSource(name, resource.path, config.binding_options)
    return ConfigTreeSource(name, resource.path, config.config_tree_options)


@dataclass(frozen=True)
class Resolvers:
    """Immutable, ordered collection of location resolvers."""

    config: Config
    resolvers: tuple[LocationResolver, ...]

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        lister: Callable[[Path], list[Path]] = list_directories,
    ) -> Resolvers:
        return cls(
            config=config,
            resolvers=(
                BindingLocationResolver(config, lister),
                ConfigTreeLocationResolver(lister),
            ),
        )

    def resolver_for(self, location: ConfigLocation) -> LocationResolver:
        """Return the first resolver accepting *location*.

        Raises:
            LocationFormatError: If no resolver recognizes the prefix.
        """
        for resolver in self.resolvers:
            if resolver.is_resolvable(location):
                return resolver
        prefixes = ", ".join(r.prefix for r in self.resolvers)
        raise LocationFormatError(
            str(location), "has an unknown prefix", hint=f"Use one of: {prefixes}"
        )

    def resolve(self, location: str | ConfigLocation) -> list[ConfigResource]:
        loc = ConfigLocation.parse(location) if isinstance(location, str) else location
        resources = self.resolver_for(loc).resolve(loc)
        log.debug("Resolved %s to %d resource(s)", loc, len(resources))
        return resources

    def load(self, location: str | ConfigLocation) -> list[PropertySource]:
        """Resolve *location* and build a source for every existing root."""
        sources: list[PropertySource] = []
        for resource in self.resolve(location):
            source = load_resource(resource, self.config)
            if source is not None:
                sources.append(source)
        return sources
