"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes and dry-run via wrappers.
"""

from modfleet.core.git.abc import AUTOSTASH_MESSAGE, Git
from modfleet.core.git.dry_run import DryRunGit
from modfleet.core.git.fake import FakeGit
from modfleet.core.git.real import RealGit

__all__ = [
    "AUTOSTASH_MESSAGE",
    "DryRunGit",
    "FakeGit",
    "Git",
    "RealGit",
]
