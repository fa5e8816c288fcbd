"""Replay a resolved path onto an interactive tree: expand and select along the way."""

from collections.abc import Sequence
from typing import Any

from loguru import logger

from hierarchy_locator.models.node import NodeIdentity
from hierarchy_locator.protocols import WidgetTree


def _segment_label(segment: NodeIdentity | str) -> str:
    if isinstance(segment, NodeIdentity):
        return segment.display_name
    return segment


def replay_and_select(
    tree: WidgetTree,
    root: Any,
    path: Sequence[NodeIdentity | str],
) -> None:
    """Walk ``path`` down ``tree``, expanding and selecting each matched node.

    Segments are matched on display name (exact, case-sensitive), first hit
    wins. A segment that is not among the current children ends the walk;
    the last matched node stays selected. The widget can lag behind the
    hierarchy, so a partial walk is not an error.

    Args:
        tree: Widget tree to drive.
        root: Node whose children are the top-level items.
        path: Root-first path, as identities or display names.
    """
    if not path:
        logger.debug("Nothing to replay: empty path")
        return

    parent = root
    for matched, segment in enumerate(path):
        label = _segment_label(segment)
        for child, child_label in tree.get_children(parent):
            if child_label == label:
                tree.set_expanded(child, True)
                tree.select(child)
                parent = child
                break
        else:
            logger.debug(
                "Replay stopped at segment {} of {}: {!r} not in widget tree",
                matched + 1,
                len(path),
                label,
            )
            return

    logger.debug("Replayed {} segments", len(path))


def select_root(tree: WidgetTree, root: Any) -> None:
    """Select and expand the first top-level item, if there is one."""
    children = tree.get_children(root)
    if not children:
        return
    first, label = children[0]
    tree.set_expanded(first, True)
    tree.select(first)
    logger.debug("Selected root item {!r}", label)
