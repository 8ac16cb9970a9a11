"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from modfleet.core.git.abc import Git
from modfleet.core.git.dry_run import DryRunGit
from modfleet.core.git.real import RealGit
from modfleet.core.github.abc import GitHub
from modfleet.core.github.dry_run import DryRunGitHub
from modfleet.core.github.real import RealGitHub
from modfleet.core.global_config import ConfigStore, FilesystemConfigStore, GlobalConfig
from modfleet.core.modules.abc import Modules
from modfleet.core.modules.dry_run import DryRunModules
from modfleet.core.modules.go import GoModules
from modfleet.core.repo_discovery import FilesystemRepoDiscovery, RepoDiscovery
from modfleet.core.user_feedback import InteractiveFeedback, SuppressedFeedback, UserFeedback


@dataclass(frozen=True)
class FleetContext:
    """Immutable context holding all dependencies for modfleet operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    github: GitHub
    modules: Modules
    discovery: RepoDiscovery
    feedback: UserFeedback
    config_store: ConfigStore
    global_config: GlobalConfig
    cwd: Path  # Current working directory at CLI invocation
    dry_run: bool

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        modules: Modules | None = None,
        discovery: RepoDiscovery | None = None,
        feedback: UserFeedback | None = None,
        config_store: ConfigStore | None = None,
        global_config: GlobalConfig | None = None,
        cwd: Path | None = None,
        dry_run: bool = False,
    ) -> "FleetContext":
        """Create test context with optional pre-configured integration classes.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            github: Optional GitHub implementation. If None, creates empty FakeGitHub.
            modules: Optional Modules implementation. If None, creates empty FakeModules.
            discovery: Optional RepoDiscovery. If None, discovers nothing.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            config_store: Optional ConfigStore. If None, creates InMemoryConfigStore.
            global_config: Optional GlobalConfig. If None, uses defaults.
            cwd: Optional current working directory. If None, uses Path("/test/default/cwd").
            dry_run: Whether to enable dry-run mode (default False).

        Example:
            >>> git = FakeGit(dirty={Path("/fleet/a")})
            >>> ctx = FleetContext.for_test(git=git, discovery=FakeRepoDiscovery(repos))
        """
        from modfleet.core.git.fake import FakeGit
        from modfleet.core.github.fake import FakeGitHub
        from modfleet.core.global_config import InMemoryConfigStore
        from modfleet.core.modules.fake import FakeModules
        from modfleet.core.repo_discovery import FakeRepoDiscovery
        from modfleet.core.user_feedback import FakeUserFeedback

        if global_config is None:
            global_config = GlobalConfig()

        return FleetContext(
            git=git if git is not None else FakeGit(),
            github=github if github is not None else FakeGitHub(),
            modules=modules if modules is not None else FakeModules(),
            discovery=discovery if discovery is not None else FakeRepoDiscovery(),
            feedback=feedback if feedback is not None else FakeUserFeedback(),
            config_store=(
                config_store if config_store is not None else InMemoryConfigStore(global_config)
            ),
            global_config=global_config,
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool, quiet: bool = False) -> FleetContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap destructive operations with dry-run wrappers
        quiet: If True, suppress informational feedback

    Raises:
        ValueError: If the global config file is malformed
    """
    git: Git = RealGit()
    github: GitHub = RealGitHub()
    modules: Modules = GoModules()

    if dry_run:
        git = DryRunGit(git)
        github = DryRunGitHub(github)
        modules = DryRunModules(modules)

    config_store = FilesystemConfigStore()
    feedback: UserFeedback = SuppressedFeedback() if quiet else InteractiveFeedback()

    return FleetContext(
        git=git,
        github=github,
        modules=modules,
        discovery=FilesystemRepoDiscovery(git, modules),
        feedback=feedback,
        config_store=config_store,
        global_config=config_store.load_or_default(),
        cwd=Path.cwd(),
        dry_run=dry_run,
    )
