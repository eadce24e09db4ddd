"""Resolver registry and loading: location expression to property sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from configtree import (
    Config,
    ConfigTreeSource,
    Option,
    Resolvers,
    ServiceBindingSource,
    load_resource,
)
from configtree.errors import (
    LocationFormatError,
    RootNotADirectoryError,
    RootNotFoundError,
)
from configtree.location import ConfigResource

pytestmark = pytest.mark.integration


@pytest.fixture
def resolvers() -> Resolvers:
    return Resolvers.from_config(Config(environ={}))


def test_bindings_location_loads_service_binding_source(
    resolvers: Resolvers, tmp_path: Path, write_file
) -> None:
    write_file("DB/type", "relational\n")
    write_file("DB/Host", "hostname\n")

    (source,) = resolvers.load(f"bindings:{tmp_path}/")

    assert isinstance(source, ServiceBindingSource)
    assert source.name == f"Service bindings '{tmp_path}'"
    # Default binding options trim newlines and lowercase names.
    assert source.list_names() == ("db.host",)
    assert source.get_value("db.host").as_text() == "hostname"


def test_config_tree_location_loads_config_tree_source(
    resolvers: Resolvers, tmp_path: Path, write_file
) -> None:
    write_file("server/port", "8080")

    (source,) = resolvers.load(f"configtree:{tmp_path}/")

    assert isinstance(source, ConfigTreeSource)
    assert source.name == f"Config tree '{tmp_path}'"
    assert source.list_names() == ("server.port",)


def test_environment_fallback_end_to_end(tmp_path: Path, bindings_root: Path) -> None:
    config = Config(environ={"SERVICE_BINDING_ROOT": str(bindings_root)})

    (source,) = Resolvers.from_config(config).load("bindings:")

    assert source.list_names() == ("db.host", "db.port")


def test_absent_required_root_fails_only_at_load(
    resolvers: Resolvers, tmp_path: Path
) -> None:
    missing = tmp_path / "later"
    resources = resolvers.resolve(f"bindings:{missing}/")

    assert resources == [ConfigResource("bindings", missing)]
    with pytest.raises(RootNotFoundError) as exc:
        load_resource(resources[0], resolvers.config)
    assert exc.value.path == missing
    assert "optional:" in (exc.value.hint or "")


def test_absent_optional_root_is_skipped(resolvers: Resolvers, tmp_path: Path) -> None:
    assert resolvers.load(f"optional:bindings:{tmp_path}/missing/") == []


def test_file_root_still_fails_construction(
    resolvers: Resolvers, write_file
) -> None:
    root = write_file("plain", "x")

    with pytest.raises(RootNotADirectoryError):
        resolvers.load(f"configtree:{root}/")


def test_pattern_loads_one_source_per_directory(
    resolvers: Resolvers, tmp_path: Path, write_file
) -> None:
    write_file("team-a/db/type", "relational")
    write_file("team-a/db/host", "a-host")
    write_file("team-b/mq/type", "rabbitmq")
    write_file("team-b/mq/uri", "amqp://b")

    sources = resolvers.load(f"bindings:{tmp_path}/team-*/")

    assert [s.list_names() for s in sources] == [("db.host",), ("mq.uri",)]


def test_unknown_prefix_is_rejected(resolvers: Resolvers) -> None:
    with pytest.raises(LocationFormatError, match="unknown prefix") as exc:
        resolvers.resolve("classpath:/config/")

    assert "bindings:" in (exc.value.hint or "")


def test_config_options_flow_to_sources(tmp_path: Path, write_file) -> None:
    write_file("db/type", "relational")
    write_file("db/port", "9999")
    config = Config(
        environ={},
        binding_options=[Option.ALWAYS_READ],
        config_tree_options=[Option.ALWAYS_READ],
    )

    (source,) = Resolvers.from_config(config).load(f"bindings:{tmp_path}/")
    (tmp_path / "db" / "port").write_text("0000")

    assert not source.is_immutable()
    assert source.get_value("db.port").as_text() == "0000"
