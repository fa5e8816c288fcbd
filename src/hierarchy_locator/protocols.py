"""Protocols for the trees the locator walks."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from hierarchy_locator.models.node import NestedHierarchy


@runtime_checkable
class HierarchyProvider(Protocol):
    """Protocol for the backing source of a project/solution hierarchy.

    Node handles are opaque and only meaningful to the provider that produced
    them. Enumeration returns None for "no more"; any other failure raises
    ProviderQueryError.
    """

    def root_node(self) -> Any:
        """Return the absolute traversal root."""
        ...

    def resolve_nested_hierarchy(self, node: Any) -> NestedHierarchy | None:
        """Return the subtree ``node`` delegates to, or None."""
        ...

    def get_canonical_name(self, node: Any) -> str:
        """Return the unique name used for matching (may be empty)."""
        ...

    def get_display_name(self, node: Any) -> str:
        """Return the label shown to users."""
        ...

    def get_first_child(self, node: Any, *, visible_only: bool) -> Any | None:
        """Return the first child of ``node``, or None."""
        ...

    def get_next_sibling(self, node: Any, *, visible_only: bool) -> Any | None:
        """Return the sibling following ``node``, or None."""
        ...


@runtime_checkable
class WidgetTree(Protocol):
    """Protocol for the interactive tree a resolved path is replayed onto."""

    def get_children(self, node: Any) -> Sequence[tuple[Any, str]]:
        """Return ``(child, label)`` pairs in display order."""
        ...

    def set_expanded(self, node: Any, expanded: bool) -> None:
        """Expand or collapse ``node``."""
        ...

    def select(self, node: Any) -> None:
        """Make ``node`` the single selected item."""
        ...
