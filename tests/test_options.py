from __future__ import annotations

import pytest

from configtree.errors import ConfigurationError
from configtree.options import Option, OptionSet

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "raw",
    [Option.ALWAYS_READ, "always_read", "ALWAYS_READ", " Always_Read "],
)
def test_option_coercion_accepts_members_values_and_names(raw) -> None:
    assert OptionSet.of(raw) == OptionSet.of(Option.ALWAYS_READ)


def test_coerce_handles_none_sets_and_iterables() -> None:
    existing = OptionSet.of(Option.USE_LOWERCASE_NAMES)

    assert OptionSet.coerce(None) == OptionSet()
    assert OptionSet.coerce(existing) is existing
    assert OptionSet.coerce([Option.ALWAYS_READ]).always_read
    assert OptionSet.coerce("use_lowercase_names").lowercase_names


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Unknown option") as exc:
        OptionSet.of("cache_forever")

    assert "ALWAYS_READ" in (exc.value.hint or "")


def test_fold_only_lowercases_when_configured() -> None:
    assert OptionSet().fold("Mixed.Case") == "Mixed.Case"
    assert OptionSet.of(Option.USE_LOWERCASE_NAMES).fold("Mixed.Case") == "mixed.case"


def test_union_and_iteration_are_stable() -> None:
    combined = OptionSet.of(Option.USE_LOWERCASE_NAMES) | OptionSet.of(
        Option.ALWAYS_READ
    )

    assert list(combined) == [Option.ALWAYS_READ, Option.USE_LOWERCASE_NAMES]
    assert Option.ALWAYS_READ in combined
    assert str(combined) == "{ALWAYS_READ, USE_LOWERCASE_NAMES}"
