"""Configuration: frozen Config built once and passed to resolvers and loaders."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from configtree.errors import ConfigurationError
from configtree.options import Option, OptionSet

ENV_PREFIX = "CONFIGTREE_"
SERVICE_BINDING_ROOT = "SERVICE_BINDING_ROOT"

_DEFAULT_BINDING_OPTIONS = OptionSet.of(
    Option.AUTO_TRIM_TRAILING_NEWLINE, Option.USE_LOWERCASE_NAMES
)


def _snapshot_environ() -> Mapping[str, str]:
    return MappingProxyType(dict(os.environ))


@dataclass(frozen=True)
class Config:
    """Immutable configuration for location resolution and loading.

    The environment is captured once at construction so resolution never
    depends on later changes to ``os.environ``.

    Example:
        config = Config(default_binding_root="/bindings/")
        resolvers = Resolvers.from_config(config)
    """

    #: Environment variable consulted when a ``bindings:`` location is empty.
    binding_root_env: str = SERVICE_BINDING_ROOT
    #: Used when the environment variable is unset.
    default_binding_root: str | None = None
    environ: Mapping[str, str] = field(default_factory=_snapshot_environ)
    binding_options: OptionSet = _DEFAULT_BINDING_OPTIONS
    config_tree_options: OptionSet = OptionSet()

    def __post_init__(self) -> None:
        """Validate fields and normalize option inputs."""
        if not isinstance(self.binding_root_env, str) or not self.binding_root_env:
            raise ConfigurationError(
                "binding_root_env must be a non-empty string",
                hint=f"Pass binding_root_env={SERVICE_BINDING_ROOT!r}.",
            )
        if self.default_binding_root is not None and not self.default_binding_root:
            raise ConfigurationError(
                "default_binding_root must not be empty",
                hint="Pass None to disable the fallback.",
            )
        object.__setattr__(
            self, "binding_options", OptionSet.coerce(self.binding_options)
        )
        object.__setattr__(
            self, "config_tree_options", OptionSet.coerce(self.config_tree_options)
        )
        if not isinstance(self.environ, MappingProxyType):
            object.__setattr__(self, "environ", MappingProxyType(dict(self.environ)))

    def binding_root_fallback(self) -> str | None:
        """Return the environment value, else the default root, else None."""
        return self.environ.get(self.binding_root_env) or self.default_binding_root

    @classmethod
    def from_env(cls, *, load_dotenv_file: bool = True) -> Config:
        """Build a Config from ``CONFIGTREE_*`` environment variables.

        Raises:
            ConfigurationError: If a variable fails validation.
        """
        if load_dotenv_file:
            from dotenv import load_dotenv

            load_dotenv()

        raw: dict[str, Any] = {
            key[len(ENV_PREFIX) :].lower(): value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }
        try:
            settings = Settings.model_validate(raw)
        except ValidationError as e:
            err = e.errors()[0]
            msg = err.get("msg") or "invalid value"
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, ") :]
            loc = ".".join(str(p) for p in err.get("loc", ()))
            raise ConfigurationError(
                f"Configuration validation failed: {loc}: {msg}",
                hint=f"Check the {ENV_PREFIX}{loc.upper()} environment variable.",
            ) from e
        return settings.to_config()

    def __str__(self) -> str:
        return (
            f"Config(binding_root_env={self.binding_root_env!r}, "
            f"default_binding_root={self.default_binding_root!r}, "
            f"binding_options={self.binding_options}, "
            f"config_tree_options={self.config_tree_options})"
        )

    __repr__ = __str__


class Settings(BaseModel):
    """Schema for ``CONFIGTREE_*`` environment variables."""

    binding_root_env: str = Field(default=SERVICE_BINDING_ROOT, min_length=1)
    default_binding_root: str | None = None
    always_read: bool = False
    lowercase_names: bool = True

    model_config = {"extra": "ignore"}

    @field_validator("binding_root_env", "default_binding_root", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim whitespace; map an empty default root to None."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def to_config(self) -> Config:
        options = {Option.AUTO_TRIM_TRAILING_NEWLINE}
        tree_options: set[Option] = set()
        if self.lowercase_names:
            options.add(Option.USE_LOWERCASE_NAMES)
        if self.always_read:
            options.add(Option.ALWAYS_READ)
            tree_options.add(Option.ALWAYS_READ)
        return Config(
            binding_root_env=self.binding_root_env,
            default_binding_root=self.default_binding_root,
            binding_options=OptionSet(frozenset(options)),
            config_tree_options=OptionSet(frozenset(tree_options)),
        )
