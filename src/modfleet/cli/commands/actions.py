"""One command per fleet action.

Every action command shares the same options and runs through
ShutdownCoordinator, which shelves local changes first and restores them
when the run ends.
"""

import dataclasses
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click

from modfleet.cli.ensure import Ensure
from modfleet.cli.output import machine_output
from modfleet.cli.rendering import print_run_summary
from modfleet.core.context import FleetContext
from modfleet.core.coordinator import ShutdownCoordinator
from modfleet.core.git.dry_run import DryRunGit
from modfleet.core.github.dry_run import DryRunGitHub
from modfleet.core.modules.dry_run import DryRunModules
from modfleet.core.modules.types import DependencyMode
from modfleet.core.options import Action, RunOptions
from modfleet.core.summary import names_to_report, summarize
from modfleet.core.user_feedback import SuppressedFeedback
from modfleet.core.versioning import is_version_tag

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., None])


def fleet_options(fn: F) -> F:
    """Options shared by every action command."""
    decorators = [
        click.argument("targets", nargs=-1, type=str),
        click.option(
            "--direct",
            is_flag=True,
            help="Only follow direct dependencies (manifest), not the resolved transitive set.",
        ),
        click.option(
            "--filter",
            "filter_modules",
            multiple=True,
            metavar="MODULE",
            help="Only act on repositories depending on MODULE. Repeatable.",
        ),
        click.option("--branch", help="Branch to checkout or create."),
        click.option("--commit", is_flag=True, help="Commit local changes."),
        click.option("--pr", "pull_request", is_flag=True, help="Open pull requests for changes."),
        click.option("--tag", is_flag=True, help="Tag new versions of changed repositories."),
        click.option("--set-version", help="Tag every repository with this exact version."),
        click.option("--message", "-m", help="Commit message (first line is the PR title)."),
        click.option(
            "--workflow-source",
            type=click.Path(path_type=Path),
            help="Workflow file or directory to install.",
        ),
        click.option(
            "--workers",
            type=click.IntRange(min=1),
            help="Parallel workers for independent actions (default: CPU count).",
        ),
        click.option("--yes", "-y", "assume_yes", is_flag=True, help="Skip confirmation."),
        click.option(
            "--dry-run", is_flag=True, help="Print what would change without changing it."
        ),
        click.option("--quiet", "-q", is_flag=True, help="Only print warnings and errors."),
        click.option(
            "--names-only",
            is_flag=True,
            help="Print only the names of repositories that changed.",
        ),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn


def _apply_run_mode(ctx: FleetContext, *, dry_run: bool, quiet: bool) -> FleetContext:
    if dry_run and not ctx.dry_run:
        ctx = dataclasses.replace(
            ctx,
            git=DryRunGit(ctx.git),
            github=DryRunGitHub(ctx.github),
            modules=DryRunModules(ctx.modules),
            dry_run=True,
        )
    if quiet:
        ctx = dataclasses.replace(ctx, feedback=SuppressedFeedback())
    return ctx


def run_action(ctx: FleetContext, action: Action, **params: object) -> None:
    """Build RunOptions from CLI params and config, run, report, exit."""
    names_only = bool(params["names_only"])
    ctx = _apply_run_mode(
        ctx,
        dry_run=bool(params["dry_run"]),
        quiet=bool(params["quiet"]) or names_only,
    )
    config = ctx.global_config

    set_version = params["set_version"]
    if set_version is not None:
        Ensure.invariant(
            is_version_tag(str(set_version)),
            f"--set-version must look like v1.2.3, got '{set_version}'",
        )
    Ensure.invariant(
        not params["pull_request"] or params["branch"] is not None,
        "--pr requires --branch",
    )
    Ensure.invariant(
        action != Action.SYNC or not (params["quiet"] or names_only) or params["assume_yes"],
        "sync with --quiet or --names-only hides the change list; pass --yes to confirm",
    )

    workflow_source = params["workflow_source"] or config.workflow_source
    if action == Action.WORKFLOW:
        workflow_source = Ensure.not_none(
            workflow_source,
            "workflow requires --workflow-source (or 'modfleet config set workflow_source PATH')",
        )
        Ensure.path_exists(Path(str(workflow_source)))

    options = RunOptions(
        action=action,
        targets=tuple(params["targets"]),  # type: ignore[arg-type]
        mode=DependencyMode.DIRECT if params["direct"] else DependencyMode.RECURSIVE,
        filter_modules=frozenset(params["filter_modules"]),  # type: ignore[arg-type]
        branch=params["branch"],  # type: ignore[arg-type]
        commit=bool(params["commit"]),
        pull_request=bool(params["pull_request"]),
        tag=bool(params["tag"]) or set_version is not None,
        set_version=set_version,  # type: ignore[arg-type]
        commit_message=str(params["message"] or config.commit_message),
        pr_body=config.pr_body,
        workflow_source=Path(str(workflow_source)) if workflow_source is not None else None,
        workers=params["workers"] or config.workers,  # type: ignore[arg-type]
        assume_yes=bool(params["assume_yes"]),
    )
    logger.debug("Running %s with %s", action.value, options)

    report = ShutdownCoordinator(ctx, options).run()

    if names_only:
        for name in names_to_report(report):
            machine_output(name)
    elif not params["quiet"] or report.exit_code != 0:
        print_run_summary(summarize(report))

    if report.exit_code != 0:
        raise SystemExit(report.exit_code)


@click.command("list")
@fleet_options
@click.pass_obj
def list_cmd(ctx: FleetContext, **params: object) -> None:
    """List repositories in dependency order."""
    run_action(ctx, Action.LIST, **params)


@click.command("pull")
@fleet_options
@click.pass_obj
def pull_cmd(ctx: FleetContext, **params: object) -> None:
    """Pull the latest changes in every repository."""
    run_action(ctx, Action.PULL, **params)


@click.command("reset")
@fleet_options
@click.pass_obj
def reset_cmd(ctx: FleetContext, **params: object) -> None:
    """Hard-reset every repository to its remote trunk branch."""
    run_action(ctx, Action.RESET, **params)


@click.command("replace")
@fleet_options
@click.pass_obj
def replace_cmd(ctx: FleetContext, **params: object) -> None:
    """Point dependencies at local checkouts of earlier repositories."""
    run_action(ctx, Action.REPLACE, **params)


@click.command("test")
@fleet_options
@click.pass_obj
def test_cmd(ctx: FleetContext, **params: object) -> None:
    """Run tests against local checkouts, then restore manifests."""
    run_action(ctx, Action.TEST, **params)


@click.command("sync")
@fleet_options
@click.pass_obj
def sync_cmd(ctx: FleetContext, **params: object) -> None:
    """Propagate new versions through the dependency chain.

    \b
    For each repository, in dependency order:
      - checkout (or create) --branch
      - update dependencies released earlier in this run
      - commit (--commit), push, open a PR (--pr)
      - tag a new version (--tag / --set-version)
    """
    run_action(ctx, Action.SYNC, **params)


@click.command("workflow")
@fleet_options
@click.pass_obj
def workflow_cmd(ctx: FleetContext, **params: object) -> None:
    """Install CI workflow files into every repository."""
    run_action(ctx, Action.WORKFLOW, **params)


ACTION_COMMANDS = (
    list_cmd,
    pull_cmd,
    reset_cmd,
    replace_cmd,
    test_cmd,
    sync_cmd,
    workflow_cmd,
)
