import logging
import os

import click

from modfleet.cli.commands.actions import ACTION_COMMANDS
from modfleet.cli.commands.config import config_group
from modfleet.cli.ensure import Ensure
from modfleet.core.context import create_context

# Enable debug logging if MODFLEET_DEBUG environment variable is set
if os.getenv("MODFLEET_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="modfleet")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Run git and dependency actions across a fleet of module repositories."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context(dry_run=False)
        except ValueError as e:
            Ensure.invariant(False, str(e))


for command in ACTION_COMMANDS:
    cli.add_command(command)
cli.add_command(config_group)


def main() -> None:
    """CLI entry point used by the `modfleet` console script."""
    cli()
