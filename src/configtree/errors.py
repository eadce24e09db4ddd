"""Exception hierarchy for configtree.

Errors are split by when they can happen. ``ConstructionError`` subclasses
abort building a source or resolving a location; no partial object is ever
returned. ``AccessError`` subclasses abort a single value read and leave the
source usable for every other key.
"""

from __future__ import annotations

from pathlib import Path


class ConfigTreeError(Exception):
    """Base exception for all configtree errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ConfigTreeError):
    """Configuration validation or resolution failed."""


# --- Construction-time errors ---


class ConstructionError(ConfigTreeError):
    """A source or location could not be built."""


class RootNotADirectoryError(ConstructionError):
    """The configured root exists but is not a directory."""

    def __init__(self, path: Path, *, hint: str | None = None) -> None:
        super().__init__(f"'{path}' is not a directory", hint=hint)
        self.path = path


class MissingRequiredFieldError(ConstructionError):
    """A service binding directory lacks a required metadata entry."""

    def __init__(self, path: Path, field: str) -> None:
        super().__init__(
            f"Service binding '{path}' must have a '{field}'",
            hint=f"Add a '{field}' file to the binding directory.",
        )
        self.path = path
        self.field = field


class SourceUnreadableError(ConstructionError):
    """Listing a directory failed with an I/O error."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        message = f"Unable to list entries in '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class MetadataUnreadableError(ConstructionError):
    """A service binding's metadata entry exists but could not be read."""

    def __init__(self, path: Path, field: str) -> None:
        super().__init__(
            f"Unable to read '{field}' of service binding '{path}'",
            hint=f"Check that '{path / field}' is a readable file.",
        )
        self.path = path
        self.field = field


class LocationFormatError(ConstructionError):
    """A location expression does not follow the expected grammar."""

    def __init__(self, location: str, reason: str, *, hint: str | None = None) -> None:
        super().__init__(f"Location '{location}' {reason}", hint=hint)
        self.location = location


class RootNotFoundError(ConstructionError):
    """A required, resolved root does not exist when it is loaded."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Config root '{path}' does not exist",
            hint="Create the directory or prefix the location with 'optional:'.",
        )
        self.path = path


# --- Access-time errors ---


class AccessError(ConfigTreeError):
    """Reading a single value failed."""


class ValueVanishedError(AccessError):
    """The file backing a value no longer exists."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"The property file '{path}' no longer exists")
        self.path = path


class ValueUnreadableError(AccessError):
    """The file backing a value exists but could not be read."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        message = f"Unable to read property file '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
