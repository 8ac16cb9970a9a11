import dataclasses
from pathlib import Path

import click

from modfleet.cli.output import machine_output, user_output
from modfleet.core.context import FleetContext
from modfleet.core.global_config import CONFIG_KEYS, GlobalConfig


def _format_value(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _update_global_config_field(
    current_config: GlobalConfig,
    field_name: str,
    value: str,
) -> GlobalConfig:
    """Update a single field in GlobalConfig and return a new instance.

    An empty value unsets optional fields.

    Raises:
        SystemExit: If the field name is invalid or value is invalid
    """
    match field_name:
        case "workers":
            if not value:
                return dataclasses.replace(current_config, workers=None)
            if not value.isdigit() or int(value) < 1:
                user_output(f"Invalid value for workers: {value} (expected a positive integer)")
                raise SystemExit(1)
            return dataclasses.replace(current_config, workers=int(value))
        case "commit_message":
            return dataclasses.replace(current_config, commit_message=value)
        case "pr_body":
            return dataclasses.replace(current_config, pr_body=value)
        case "workflow_source":
            if not value:
                return dataclasses.replace(current_config, workflow_source=None)
            return dataclasses.replace(
                current_config, workflow_source=Path(value).expanduser().resolve()
            )
        case _:
            user_output(f"Invalid config key: {field_name}")
            raise SystemExit(1)


@click.group("config")
def config_group() -> None:
    """Manage modfleet configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: FleetContext) -> None:
    """Print a list of configuration keys and values."""
    user_output(click.style("Global configuration:", bold=True))
    if not ctx.config_store.exists():
        user_output(f"  (not configured, using defaults; file: {ctx.config_store.path()})")
    for key in CONFIG_KEYS:
        machine_output(f"  {key}={_format_value(getattr(ctx.global_config, key))}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: FleetContext, key: str) -> None:
    """Print the value of a given configuration key."""
    if key not in CONFIG_KEYS:
        user_output(f"Invalid config key: {key}")
        raise SystemExit(1)
    machine_output(_format_value(getattr(ctx.global_config, key)))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: FleetContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key."""
    new_config = _update_global_config_field(ctx.global_config, key, value)
    ctx.config_store.save(new_config)
    user_output(f"Set {key}={_format_value(getattr(new_config, key))}")
