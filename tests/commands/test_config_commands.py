"""Tests for the config command."""

from pathlib import Path

from click.testing import CliRunner

from modfleet.cli.cli import cli
from modfleet.core.context import FleetContext
from modfleet.core.global_config import (
    DEFAULT_COMMIT_MESSAGE,
    GlobalConfig,
    InMemoryConfigStore,
)


def test_config_list_without_config_file_shows_defaults() -> None:
    ctx = FleetContext.for_test(config_store=InMemoryConfigStore())

    result = CliRunner().invoke(cli, ["config", "list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Global configuration:" in result.output
    assert "not configured, using defaults" in result.output
    assert "  workers=" in result.output
    assert f"  commit_message={DEFAULT_COMMIT_MESSAGE}" in result.output


def test_config_list_shows_configured_values() -> None:
    config = GlobalConfig(workers=4, workflow_source=Path("/shared/workflows"))
    ctx = FleetContext.for_test(global_config=config)

    result = CliRunner().invoke(cli, ["config", "list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "not configured" not in result.output
    assert "  workers=4" in result.output
    assert "  workflow_source=/shared/workflows" in result.output


def test_config_get() -> None:
    ctx = FleetContext.for_test(global_config=GlobalConfig(pr_body="Automated bump"))

    result = CliRunner().invoke(cli, ["config", "get", "pr_body"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.output == "Automated bump\n"


def test_config_get_invalid_key() -> None:
    result = CliRunner().invoke(cli, ["config", "get", "root_dir"], obj=FleetContext.for_test())

    assert result.exit_code == 1
    assert "Invalid config key: root_dir" in result.output


def test_config_set_saves_to_store() -> None:
    store = InMemoryConfigStore(GlobalConfig())
    ctx = FleetContext.for_test(config_store=store)

    result = CliRunner().invoke(cli, ["config", "set", "workers", "3"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Set workers=3" in result.output
    assert store.load().workers == 3


def test_config_set_empty_value_unsets_optional_field() -> None:
    store = InMemoryConfigStore(GlobalConfig(workers=8))
    ctx = FleetContext.for_test(config_store=store, global_config=GlobalConfig(workers=8))

    result = CliRunner().invoke(cli, ["config", "set", "workers", ""], obj=ctx)

    assert result.exit_code == 0, result.output
    assert store.load().workers is None


def test_config_set_workflow_source_is_resolved(tmp_path: Path) -> None:
    store = InMemoryConfigStore(GlobalConfig())
    ctx = FleetContext.for_test(config_store=store)

    result = CliRunner().invoke(
        cli, ["config", "set", "workflow_source", str(tmp_path / "wf")], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert store.load().workflow_source == (tmp_path / "wf").resolve()


def test_config_set_rejects_invalid_workers() -> None:
    store = InMemoryConfigStore(GlobalConfig())
    ctx = FleetContext.for_test(config_store=store)

    result = CliRunner().invoke(cli, ["config", "set", "workers", "zero"], obj=ctx)

    assert result.exit_code == 1
    assert "Invalid value for workers: zero" in result.output
    assert store.load().workers is None


def test_config_set_rejects_unknown_key() -> None:
    result = CliRunner().invoke(
        cli, ["config", "set", "color", "true"], obj=FleetContext.for_test()
    )

    assert result.exit_code == 1
    assert "Invalid config key: color" in result.output
