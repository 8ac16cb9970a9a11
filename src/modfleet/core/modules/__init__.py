"""Module manifest operations subpackage.

Provides the Modules abstraction over dependency manifests with a Go
toolchain implementation, an in-memory fake, and a dry-run wrapper.
"""

from modfleet.core.modules.abc import Modules
from modfleet.core.modules.dry_run import DryRunModules
from modfleet.core.modules.fake import FakeModules
from modfleet.core.modules.go import GoModules
from modfleet.core.modules.types import DependencyMode, Manifest, merge_dependency_sets

__all__ = [
    "DependencyMode",
    "DryRunModules",
    "FakeModules",
    "GoModules",
    "Manifest",
    "Modules",
    "merge_dependency_sets",
]
