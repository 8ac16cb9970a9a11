"""Installing automation (CI workflow) files into repositories."""

import shutil
from pathlib import Path

WORKFLOW_SUFFIXES = (".yml", ".yaml")


def workflow_dir(repo_root: Path) -> Path:
    return repo_root / ".github" / "workflows"


def workflow_files(source: Path) -> list[Path]:
    """Workflow files provided by source (a single file or a directory of them).

    Raises:
        FileNotFoundError: If source does not exist or holds no workflow files
    """
    if source.is_file():
        return [source]
    if source.is_dir():
        files = sorted(p for p in source.iterdir() if p.suffix in WORKFLOW_SUFFIXES)
        if files:
            return files
        raise FileNotFoundError(f"No workflow files (*.yml, *.yaml) in {source}")
    raise FileNotFoundError(f"Workflow source not found: {source}")


def install_workflows(source: Path, repo_root: Path) -> list[Path]:
    """Copy workflow files into the repository.

    Returns:
        Destination paths that were created or changed
    """
    target_dir = workflow_dir(repo_root)
    changed: list[Path] = []
    for file in workflow_files(source):
        destination = target_dir / file.name
        if destination.exists() and destination.read_bytes() == file.read_bytes():
            continue
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(file, destination)
        changed.append(destination)
    return changed
