"""Models for hierarchies loaded from a JSON snapshot."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SnapshotNode:
    """A single node of a snapshot hierarchy."""

    id: str
    display_name: str
    canonical_name: str = ""
    children: tuple[str, ...] = ()
    hidden: bool = False
    nested: str | None = None
    stale: bool = False


@dataclass(frozen=True)
class SnapshotHierarchy:
    """One backing provider's tree: nodes by id plus parent links."""

    name: str
    root: str
    nodes: dict[str, SnapshotNode] = field(default_factory=dict)
    parents: dict[str, str] = field(default_factory=dict)

    def node(self, node_id: str) -> SnapshotNode | None:
        return self.nodes.get(node_id)
