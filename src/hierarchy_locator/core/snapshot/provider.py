"""HierarchyProvider backed by a parsed snapshot."""

from typing import TYPE_CHECKING

from hierarchy_locator.errors import ProviderQueryError
from hierarchy_locator.models.node import NestedHierarchy
from hierarchy_locator.models.snapshot import SnapshotHierarchy, SnapshotNode

if TYPE_CHECKING:
    from hierarchy_locator.core.snapshot.reader import Snapshot


class SnapshotProvider:
    """Serve one snapshot hierarchy; node handles are node ids."""

    def __init__(self, snapshot: "Snapshot", name: str) -> None:
        self._snapshot = snapshot
        self.hierarchy: SnapshotHierarchy = snapshot.hierarchies[name]

    def __repr__(self) -> str:
        return f"SnapshotProvider({self.hierarchy.name!r})"

    def _lookup(self, operation: str, node_id: str) -> SnapshotNode:
        node = self.hierarchy.node(node_id)
        if node is None:
            raise ProviderQueryError(operation, node_id, f"unknown in {self.hierarchy.name!r}")
        return node

    def root_node(self) -> str:
        return self.hierarchy.root

    def resolve_nested_hierarchy(self, node: str) -> NestedHierarchy | None:
        target = self._lookup("resolve_nested_hierarchy", node).nested
        if target is None:
            return None

        nested = SnapshotProvider(self._snapshot, target)
        self._snapshot.open_handles += 1
        self._snapshot.handles_acquired += 1
        return NestedHierarchy(provider=nested, root=nested.root_node(), on_release=self._release)

    def _release(self) -> None:
        self._snapshot.open_handles -= 1

    def get_canonical_name(self, node: str) -> str:
        return self._lookup("get_canonical_name", node).canonical_name

    def get_display_name(self, node: str) -> str:
        return self._lookup("get_display_name", node).display_name

    def _first_from(self, candidates: tuple[str, ...], *, visible_only: bool) -> str | None:
        for candidate in candidates:
            if not visible_only or not self.hierarchy.nodes[candidate].hidden:
                return candidate
        return None

    def get_first_child(self, node: str, *, visible_only: bool) -> str | None:
        children = self._lookup("get_first_child", node).children
        return self._first_from(children, visible_only=visible_only)

    def get_next_sibling(self, node: str, *, visible_only: bool) -> str | None:
        self._lookup("get_next_sibling", node)
        parent_id = self.hierarchy.parents.get(node)
        if parent_id is None:
            return None
        siblings = self.hierarchy.nodes[parent_id].children
        index = siblings.index(node)
        return self._first_from(siblings[index + 1 :], visible_only=visible_only)
