"""configtree: directory trees as flat, queryable configuration.

Public API:
    - ConfigTreeSource: one property per file under a root directory
    - ServiceBindingSource: ``<binding>.<property>`` names from a bindings root
    - Resolvers: resolve ``bindings:`` / ``configtree:`` locations into sources
    - Config: frozen configuration passed to resolvers and loaders
    - Option / OptionSet: per-source options
"""

from __future__ import annotations

import logging

from configtree.bindings import ServiceBinding, ServiceBindingSet, ServiceBindingSource
from configtree.config import Config
from configtree.config_tree import ConfigTreeSource
from configtree.errors import (
    AccessError,
    ConfigTreeError,
    ConfigurationError,
    ConstructionError,
    LocationFormatError,
    MetadataUnreadableError,
    MissingRequiredFieldError,
    RootNotADirectoryError,
    RootNotFoundError,
    SourceUnreadableError,
    ValueUnreadableError,
    ValueVanishedError,
)
from configtree.loader import Resolvers, load_resource
from configtree.location import ConfigLocation, ConfigResource
from configtree.options import Option, OptionSet
from configtree.types import PropertySource
from configtree.values import Origin, Value

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("configtree")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("configtree").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Sources
    "ConfigTreeSource",
    "ServiceBindingSource",
    "ServiceBinding",
    "ServiceBindingSet",
    "PropertySource",
    "Value",
    "Origin",
    # Options and configuration
    "Option",
    "OptionSet",
    "Config",
    # Locations
    "Resolvers",
    "ConfigLocation",
    "ConfigResource",
    "load_resource",
    # Errors
    "ConfigTreeError",
    "ConfigurationError",
    "ConstructionError",
    "AccessError",
    "RootNotADirectoryError",
    "MissingRequiredFieldError",
    "MetadataUnreadableError",
    "SourceUnreadableError",
    "LocationFormatError",
    "RootNotFoundError",
    "ValueVanishedError",
    "ValueUnreadableError",
]
