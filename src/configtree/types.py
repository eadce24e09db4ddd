"""Public types shared by every property source.

Example:
    ```python
    from configtree import ConfigTreeSource, Option

    source = ConfigTreeSource("config", "/etc/config", [Option.ALWAYS_READ])
    for name in source.list_names():
        print(name, source.get_origin(name))
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from configtree.options import Option, OptionSet
from configtree.values import Origin, Value

OptionsInput = OptionSet | Iterable[Option | str] | None


@runtime_checkable
class PropertySource(Protocol):
    """Accessor contract consumed by the configuration pipeline."""

    name: str

    def list_names(self) -> tuple[str, ...]: ...

    def get_value(self, name: str) -> Value | None: ...

    def get_origin(self, name: str) -> Origin | None: ...

    def is_immutable(self) -> bool: ...


__all__ = [  # noqa: RUF022
    "PropertySource",
    "OptionsInput",
    "Option",
    "OptionSet",
    "Origin",
    "Value",
]
