from __future__ import annotations

from pathlib import Path

import pytest

from configtree.errors import (
    AccessError,
    ConfigTreeError,
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

pytestmark = pytest.mark.unit


def test_base_error_carries_hint() -> None:
    err = ConfigTreeError("boom", hint="do this")

    assert str(err) == "boom"
    assert err.hint == "do this"
    assert ConfigTreeError("fail").hint is None


@pytest.mark.parametrize(
    "err",
    [
        RootNotADirectoryError(Path("/r")),
        MissingRequiredFieldError(Path("/r/db"), "type"),
        MetadataUnreadableError(Path("/r/db"), "type"),
        SourceUnreadableError(Path("/r"), "Permission denied"),
        LocationFormatError("bindings:/x", "must end with '/'"),
        RootNotFoundError(Path("/r")),
    ],
)
def test_construction_errors_are_not_access_errors(err: ConfigTreeError) -> None:
    assert isinstance(err, ConstructionError)
    assert not isinstance(err, AccessError)


def test_value_vanished_is_an_access_error() -> None:
    err = ValueVanishedError(Path("/r/db/host"))

    assert isinstance(err, AccessError)
    assert not isinstance(err, ConstructionError)
    assert err.path == Path("/r/db/host")


def test_value_unreadable_is_an_access_error() -> None:
    err = ValueUnreadableError(Path("/r/key"), "Permission denied")

    assert isinstance(err, AccessError)
    assert str(err) == "Unable to read property file '/r/key': Permission denied"


def test_messages_name_the_offending_path() -> None:
    assert str(SourceUnreadableError(Path("/r"), "Permission denied")) == (
        "Unable to list entries in '/r': Permission denied"
    )
    assert str(SourceUnreadableError(Path("/r"))) == "Unable to list entries in '/r'"
    assert str(MissingRequiredFieldError(Path("/r/db"), "type")) == (
        "Service binding '/r/db' must have a 'type'"
    )
