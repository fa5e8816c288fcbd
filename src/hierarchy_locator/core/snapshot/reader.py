"""Parse hierarchy snapshot JSON into providers and widget trees."""

import json
from collections import deque
from pathlib import Path
from typing import Any

from loguru import logger

from hierarchy_locator.core.snapshot.provider import SnapshotProvider
from hierarchy_locator.core.snapshot.widget import SnapshotWidgetTree, build_widget_root
from hierarchy_locator.models.snapshot import SnapshotHierarchy, SnapshotNode


class Snapshot:
    """A set of named hierarchies, one of which is the outermost root."""

    def __init__(self, hierarchies: dict[str, SnapshotHierarchy], *, root: str) -> None:
        self.hierarchies = hierarchies
        self.root = root
        # Nested hierarchy handles currently borrowed by a search.
        self.open_handles = 0
        self.handles_acquired = 0

    def provider(self, name: str | None = None) -> SnapshotProvider:
        """Return a provider for hierarchy ``name`` (the root hierarchy by default)."""
        return SnapshotProvider(self, name or self.root)

    def widget_tree(self) -> SnapshotWidgetTree:
        """Build a fresh widget tree mirroring the delegation-resolved hierarchy."""
        return SnapshotWidgetTree(build_widget_root(self.hierarchies, self.root))


def _flag(raw: dict[str, Any], key: str) -> bool:
    value = raw.get(key, False)
    if not isinstance(value, bool):
        msg = f"Node {raw['id']!r}: {key!r} must be true or false, got {value!r}"
        raise ValueError(msg)
    return value


def _parse_node(hierarchy: str, raw: Any) -> SnapshotNode:
    if not isinstance(raw, dict):
        msg = f"Hierarchy {hierarchy!r}: node entries must be objects, got {raw!r}"
        raise ValueError(msg)
    if not isinstance(raw["id"], str):
        msg = f"Hierarchy {hierarchy!r}: node id must be a string, got {raw['id']!r}"
        raise ValueError(msg)
    children = raw.get("children", [])
    if not isinstance(children, list) or not all(isinstance(c, str) for c in children):
        msg = f"Node {raw['id']!r}: 'children' must be a list of ids"
        raise ValueError(msg)
    nested = raw.get("nested")
    if nested is not None and not isinstance(nested, str):
        msg = f"Node {raw['id']!r}: 'nested' must be a hierarchy name, got {nested!r}"
        raise ValueError(msg)
    return SnapshotNode(
        id=raw["id"],
        display_name=raw["display_name"],
        canonical_name=raw.get("canonical_name") or "",
        children=tuple(children),
        hidden=_flag(raw, "hidden"),
        nested=nested,
        stale=_flag(raw, "stale"),
    )


def parse_hierarchy(name: str, data: Any) -> SnapshotHierarchy:
    """Parse one hierarchy, checking that every node hangs off the root exactly once.

    Raises:
        ValueError: Malformed entries, or duplicate, unknown, repeated or
            orphaned node ids.
    """
    if not isinstance(data, dict):
        msg = f"Hierarchy {name!r} must be an object, got {type(data).__name__}"
        raise ValueError(msg)

    raw_nodes = data["nodes"]
    if not isinstance(raw_nodes, list):
        msg = f"Hierarchy {name!r}: 'nodes' must be a list"
        raise ValueError(msg)

    nodes_by_id: dict[str, SnapshotNode] = {}
    for raw in raw_nodes:
        node = _parse_node(name, raw)
        if node.id in nodes_by_id:
            msg = f"Hierarchy {name!r}: duplicate node id {node.id!r}"
            raise ValueError(msg)
        nodes_by_id[node.id] = node
    root_id = data.get("root", "root")
    if not isinstance(root_id, str) or root_id not in nodes_by_id:
        msg = f"Hierarchy {name!r}: root node {root_id!r} not found"
        raise ValueError(msg)

    remaining = dict(nodes_by_id)
    parents: dict[str, str] = {}
    todo: deque[str] = deque([root_id])
    while todo:
        node_id = todo.popleft()
        node = remaining.pop(node_id)
        for child_id in node.children:
            if child_id not in nodes_by_id:
                msg = f"Hierarchy {name!r}: node {node_id!r} has unknown child {child_id!r}"
                raise ValueError(msg)
            if child_id not in remaining or child_id in parents:
                msg = f"Hierarchy {name!r}: node {child_id!r} is reachable more than once"
                raise ValueError(msg)
            parents[child_id] = node_id
            todo.append(child_id)

    if remaining:
        msg = f"Hierarchy {name!r}: orphaned nodes {sorted(remaining.keys())!r}"
        raise ValueError(msg)

    return SnapshotHierarchy(name=name, root=root_id, nodes=nodes_by_id, parents=parents)


def _check_delegation(hierarchies: dict[str, SnapshotHierarchy]) -> None:
    edges = {
        name: {n.nested for n in h.nodes.values() if n.nested is not None}
        for name, h in hierarchies.items()
    }
    for name, targets in edges.items():
        unknown = sorted(t for t in targets if t not in hierarchies)
        if unknown:
            msg = f"Hierarchy {name!r} delegates to unknown hierarchies {unknown!r}"
            raise ValueError(msg)

    # Iterative DFS colouring: 1 = on the current chain, 2 = done.
    state: dict[str, int] = {}
    for start in sorted(edges):
        if state.get(start):
            continue
        stack: list[tuple[str, list[str]]] = [(start, sorted(edges[start]))]
        state[start] = 1
        while stack:
            current, pending = stack[-1]
            if not pending:
                state[current] = 2
                stack.pop()
                continue
            nxt = pending.pop()
            if state.get(nxt) == 1:
                msg = f"Delegation cycle through hierarchy {nxt!r}"
                raise ValueError(msg)
            if not state.get(nxt):
                state[nxt] = 1
                stack.append((nxt, sorted(edges[nxt])))


def parse_snapshot(data: Any) -> Snapshot:
    """Parse a snapshot document.

    Args:
        data: Raw snapshot (``{"root": ..., "hierarchies": {...}}``).

    Returns:
        Snapshot ready to hand out providers and widget trees.

    Raises:
        ValueError: The document is structurally invalid.
    """
    if not isinstance(data, dict):
        msg = f"Snapshot must be a JSON object, got {type(data).__name__}"
        raise ValueError(msg)

    raw_hierarchies = data.get("hierarchies")
    if not isinstance(raw_hierarchies, dict) or not raw_hierarchies:
        msg = "Snapshot has no hierarchies"
        raise ValueError(msg)

    root = data.get("root") or next(iter(raw_hierarchies))
    if not isinstance(root, str) or root not in raw_hierarchies:
        msg = f"Root hierarchy {root!r} not found"
        raise ValueError(msg)

    hierarchies = {name: parse_hierarchy(name, raw) for name, raw in raw_hierarchies.items()}
    _check_delegation(hierarchies)
    return Snapshot(hierarchies, root=root)


def load_snapshot(path: Path) -> Snapshot:
    """Read and parse a snapshot file."""
    data = json.loads(path.read_text(encoding="utf-8"))
    snapshot = parse_snapshot(data)
    logger.debug(
        "Loaded snapshot {} ({} hierarchies, {} nodes)",
        path,
        len(snapshot.hierarchies),
        sum(len(h.nodes) for h in snapshot.hierarchies.values()),
    )
    return snapshot
