"""Property source options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from configtree.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class Option(str, Enum):
    """Options accepted by the tree-backed property sources."""

    #: Re-read the backing file on every access instead of caching it.
    ALWAYS_READ = "always_read"
    #: Convert file and directory names to lowercase.
    USE_LOWERCASE_NAMES = "use_lowercase_names"
    #: Strip one trailing line terminator from single-line text values.
    AUTO_TRIM_TRAILING_NEWLINE = "auto_trim_trailing_newline"


@dataclass(frozen=True)
class OptionSet:
    """Immutable set of options, fixed for the lifetime of a source."""

    members: frozenset[Option] = frozenset()

    @classmethod
    def of(cls, *options: Option | str) -> OptionSet:
        """Build a set from enum members or their string values."""
        return cls(frozenset(_coerce(o) for o in options))

    @classmethod
    def coerce(cls, options: OptionSet | Iterable[Option | str] | None) -> OptionSet:
        """Normalize ``None``, an existing set, or any iterable of options."""
        if options is None:
            return cls()
        if isinstance(options, OptionSet):
            return options
        if isinstance(options, (str, Option)):
            return cls.of(options)
        return cls.of(*options)

    def __contains__(self, option: object) -> bool:
        return option in self.members

    def __iter__(self) -> Iterator[Option]:
        return iter(sorted(self.members, key=lambda o: o.value))

    def __len__(self) -> int:
        return len(self.members)

    def __or__(self, other: OptionSet) -> OptionSet:
        return OptionSet(self.members | other.members)

    @property
    def always_read(self) -> bool:
        return Option.ALWAYS_READ in self.members

    @property
    def lowercase_names(self) -> bool:
        return Option.USE_LOWERCASE_NAMES in self.members

    @property
    def trim_trailing_newline(self) -> bool:
        return Option.AUTO_TRIM_TRAILING_NEWLINE in self.members

    def fold(self, name: str) -> str:
        """Apply the configured case-folding to a produced or looked-up name."""
        return name.lower() if self.lowercase_names else name

    def __str__(self) -> str:
        return "{" + ", ".join(o.name for o in self) + "}"


def _coerce(option: Option | str) -> Option:
    if isinstance(option, Option):
        return option
    try:
        return Option(option.strip().lower())
    except (AttributeError, ValueError):
        pass
    try:
        return Option[str(option).strip().upper()]
    except KeyError:
        valid = ", ".join(o.name for o in Option)
        raise ConfigurationError(
            f"Unknown option: {option!r}", hint=f"Valid options: {valid}"
        ) from None
