"""CLI for hierarchy-locator (locate, enumerate, contains)."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from hierarchy_locator.config import PATH_SEPARATOR, resolve_snapshot_file
from hierarchy_locator.core.navigator import locate_and_select
from hierarchy_locator.core.search.engine import HierarchySearchEngine
from hierarchy_locator.core.snapshot.reader import Snapshot, load_snapshot
from hierarchy_locator.errors import HierarchyLocatorError
from hierarchy_locator.logging_config import configure_logging
from hierarchy_locator.models.node import MatchRule, TraversalPolicy

app = typer.Typer(help="Locate items in a project hierarchy snapshot and select them.")

SnapshotOption = Annotated[
    Path | None,
    typer.Option("--snapshot", "-s", help="Hierarchy snapshot JSON file"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    trace: bool = typer.Option(False, "--trace", help="Log every node walked"),
) -> None:
    configure_logging(verbose=verbose, trace=trace)


def _open_snapshot(snapshot: Path | None) -> Snapshot:
    """Load the snapshot, exiting with status 1 if it is missing or invalid."""
    try:
        path = resolve_snapshot_file(snapshot)
    except RuntimeError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    if not path.is_file():
        logger.error("Snapshot file not found: {}", path)
        raise typer.Exit(1)

    try:
        return load_snapshot(path)
    except (ValueError, KeyError) as e:
        logger.error("Invalid snapshot {}: {}", path, e)
        raise typer.Exit(1) from e


@app.command()
def locate(
    target: str = typer.Argument(..., help="Canonical name of the item to locate"),
    snapshot: SnapshotOption = None,
    visible_only: bool = typer.Option(
        False, "--visible-only", help="Only walk children currently visible in the explorer"
    ),
    suffix: bool = typer.Option(
        False, "--suffix", help="Match when the target ends with a node's canonical name"
    ),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Find an item, print its path and select it in the widget tree."""
    snap = _open_snapshot(snapshot)
    tree = snap.widget_tree()

    try:
        result = locate_and_select(
            snap.provider(),
            tree,
            tree.root,
            target,
            policy=TraversalPolicy(visible_only=visible_only),
            match_rule=MatchRule.SUFFIX if suffix else MatchRule.EXACT,
        )
    except HierarchyLocatorError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    if output_json:
        data = {
            "found": result.found,
            "path": [
                {"canonical_name": i.canonical_name, "display_name": i.display_name}
                for i in result.path
            ],
            "selected": list(tree.selected_path()),
        }
        typer.echo(json.dumps(data, indent=2))
    elif result.found:
        typer.echo(result.describe(PATH_SEPARATOR))
        typer.echo(f"selected: {' / '.join(tree.selected_path())}")
    else:
        typer.echo(f"'{target}' not found.")

    if not result.found:
        raise typer.Exit(1)


@app.command(name="enumerate")
def enumerate_cmd(
    snapshot: SnapshotOption = None,
    visible_only: bool = typer.Option(
        False, "--visible-only", help="Only walk children currently visible in the explorer"
    ),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List every node in walk order."""
    snap = _open_snapshot(snapshot)
    try:
        paths = HierarchySearchEngine().enumerate(
            snap.provider(), policy=TraversalPolicy(visible_only=visible_only)
        )
    except HierarchyLocatorError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    if output_json:
        data = {
            "nodes": [
                {
                    "canonical_name": p[-1].canonical_name,
                    "display_name": p[-1].display_name,
                    "depth": len(p) - 1,
                }
                for p in paths
            ],
            "count": len(paths),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"{len(paths)} nodes:\n")
    for p in paths:
        indent = "    " * (len(p) - 1)
        typer.echo(f"{indent}{p[-1]}")


@app.command()
def contains(
    name: str = typer.Argument(..., help="Display name to look for"),
    snapshot: SnapshotOption = None,
) -> None:
    """Check whether any node carries the given display name."""
    snap = _open_snapshot(snapshot)
    try:
        present = HierarchySearchEngine().contains_display_name(snap.provider(), name)
    except HierarchyLocatorError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    typer.echo("yes" if present else "no")
    if not present:
        raise typer.Exit(1)
