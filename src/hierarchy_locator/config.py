"""Configuration constants for hierarchy-locator."""

import os
from pathlib import Path

# Separator used when rendering a resolved path for logs and the CLI.
PATH_SEPARATOR: str = "->"

# Environment variable naming a snapshot file; takes precedence over SNAPSHOT_FILES.
SNAPSHOT_ENV_VAR: str = "HIERARCHY_LOCATOR_SNAPSHOT"

# Snapshot file locations. First file found is used.
SNAPSHOT_FILES: list[Path] = [
    Path("hierarchy.json"),
    Path("~/.config/hierarchy-locator/hierarchy.json").expanduser(),
    Path("~/.local/share/hierarchy-locator/hierarchy.json").expanduser(),
]


def resolve_snapshot_file(explicit: Path | None = None) -> Path:
    """Return the snapshot file to load.

    An explicit path wins, then the environment variable, then the first
    existing entry of SNAPSHOT_FILES.
    """
    if explicit is not None:
        return explicit.expanduser()

    from_env = os.environ.get(SNAPSHOT_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()

    for candidate in SNAPSHOT_FILES:
        if candidate.is_file():
            return candidate
    msg = f"Cannot find a hierarchy snapshot, was looking at {SNAPSHOT_FILES!r}"
    raise RuntimeError(msg)
