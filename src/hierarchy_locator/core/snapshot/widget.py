"""WidgetTree backed by a snapshot: expansion and single selection in memory."""

from dataclasses import dataclass, field

from hierarchy_locator.models.snapshot import SnapshotHierarchy


@dataclass(eq=False)
class WidgetItem:
    """A row of the widget tree."""

    label: str
    parent: "WidgetItem | None" = None
    children: list["WidgetItem"] = field(default_factory=list)
    expanded: bool = False

    def __repr__(self) -> str:
        return f"WidgetItem({self.label!r})"


def build_widget_root(hierarchies: dict[str, SnapshotHierarchy], root: str) -> WidgetItem:
    """Mirror the root hierarchy as widget items, following delegation.

    Delegating nodes are shown as the nested root they hand off to. Hidden
    nodes are not shown, and stale nodes are shown without children.
    """
    container = WidgetItem(label="")

    def add(hierarchy: SnapshotHierarchy, node_id: str, parent: WidgetItem) -> None:
        node = hierarchy.nodes[node_id]
        while node.nested is not None:
            hierarchy = hierarchies[node.nested]
            node = hierarchy.nodes[hierarchy.root]
        item = WidgetItem(label=node.display_name, parent=parent)
        parent.children.append(item)
        if node.stale:
            return
        for child_id in node.children:
            if not hierarchy.nodes[child_id].hidden:
                add(hierarchy, child_id, item)

    top = hierarchies[root]
    add(top, top.root, container)
    return container


class SnapshotWidgetTree:
    """In-memory widget tree; ``root`` is an unlabelled container of top-level items."""

    def __init__(self, root: WidgetItem) -> None:
        self.root = root
        self.selected: WidgetItem | None = None

    def get_children(self, node: WidgetItem) -> list[tuple[WidgetItem, str]]:
        return [(child, child.label) for child in node.children]

    def set_expanded(self, node: WidgetItem, expanded: bool) -> None:
        node.expanded = expanded

    def select(self, node: WidgetItem) -> None:
        self.selected = node

    def selected_path(self) -> tuple[str, ...]:
        """Labels from the top-level item down to the selected item."""
        labels: list[str] = []
        item = self.selected
        while item is not None and item is not self.root:
            labels.append(item.label)
            item = item.parent
        return tuple(reversed(labels))
