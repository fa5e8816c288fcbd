"""Depth-first search over a hierarchy whose nodes may delegate to nested providers."""

from collections.abc import Callable
from contextlib import closing
from typing import Any, Protocol

from loguru import logger

from hierarchy_locator.errors import InvalidTargetError, SearchCancelledError
from hierarchy_locator.models.node import (
    NOT_FOUND,
    MatchRule,
    NodeIdentity,
    SearchPath,
    SearchResult,
    TraversalPolicy,
)
from hierarchy_locator.protocols import HierarchyProvider


class CancelSignal(Protocol):
    """Anything with an ``is_set`` method, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


class PathStack:
    """Ancestor identities of the node being visited, root first."""

    def __init__(self) -> None:
        self._items: list[NodeIdentity] = []

    def __len__(self) -> int:
        return len(self._items)

    def push(self, identity: NodeIdentity) -> None:
        self._items.append(identity)

    def pop(self) -> NodeIdentity:
        return self._items.pop()

    def truncate(self, depth: int) -> None:
        """Pop entries until only ``depth`` remain."""
        while len(self._items) > depth:
            self.pop()

    def snapshot(self) -> SearchPath:
        return tuple(self._items)


class _Walk:
    """State for a single traversal: the path stack, the predicate, and the cancel signal."""

    def __init__(
        self,
        stack: PathStack,
        matcher: Callable[[NodeIdentity], bool],
        *,
        cancel: CancelSignal | None = None,
        visited: list[SearchPath] | None = None,
    ) -> None:
        self.stack = stack
        self.matcher = matcher
        self.cancel = cancel
        self.visited = visited

    def visit(
        self,
        provider: HierarchyProvider,
        node: Any,
        depth: int,
        policy: TraversalPolicy,
    ) -> bool:
        if self.cancel is not None and self.cancel.is_set():
            raise SearchCancelledError(len(self.stack))

        nested = provider.resolve_nested_hierarchy(node)
        if nested is not None:
            # The delegating node is transparent: same depth, never matched itself.
            with closing(nested):
                return self.visit(nested.provider, nested.root, depth, policy.for_nested())

        identity = NodeIdentity(
            canonical_name=provider.get_canonical_name(node) or "",
            display_name=provider.get_display_name(node) or "",
        )
        mark = len(self.stack)
        self.stack.push(identity)
        logger.trace("Walking hierarchy node: {}", identity)

        found = False
        try:
            found = self._match_or_descend(provider, node, identity, depth, policy)
        finally:
            if not found:
                self.stack.truncate(mark)
        return found

    def _match_or_descend(
        self,
        provider: HierarchyProvider,
        node: Any,
        identity: NodeIdentity,
        depth: int,
        policy: TraversalPolicy,
    ) -> bool:
        if self.visited is not None:
            self.visited.append(self.stack.snapshot())
        if self.matcher(identity):
            return True

        depth += 1
        visible_only = policy.uses_visible_enumeration(depth)
        child = provider.get_first_child(node, visible_only=visible_only)
        while child is not None:
            if self.visit(provider, child, depth, policy):
                return True
            child = provider.get_next_sibling(child, visible_only=visible_only)
        return False


def _never(_identity: NodeIdentity) -> bool:
    return False


class HierarchySearchEngine:
    """Locate a node in a hierarchy and report the root-to-node path.

    Traversal is depth-first and pre-order with left-to-right siblings, and
    stops at the first match. A node that delegates to a nested hierarchy is
    replaced by the nested root and never appears in the path.

    One engine may serve many searches, but a provider must not be searched
    by two callers at once.
    """

    def __init__(
        self,
        *,
        match_rule: MatchRule = MatchRule.EXACT,
        stack_factory: Callable[[], PathStack] = PathStack,
    ) -> None:
        self.match_rule = match_rule
        self._stack_factory = stack_factory

    def search(
        self,
        provider: HierarchyProvider,
        target: str,
        *,
        policy: TraversalPolicy | None = None,
        root: Any = None,
        cancel: CancelSignal | None = None,
    ) -> SearchResult:
        """Find the first node whose canonical name satisfies the match rule.

        Args:
            provider: Provider of the outermost hierarchy.
            target: Identifier to match; must not be empty (see ``enumerate``).
            policy: Child enumeration rules (defaults to ``TraversalPolicy()``).
            root: Node to start from; defaults to ``provider.root_node()``.
            cancel: Checked before every node visit.

        Returns:
            SearchResult with the path to the match, or an empty not-found result.

        Raises:
            InvalidTargetError: ``target`` is empty.
            ProviderQueryError: A provider call failed.
            SearchCancelledError: ``cancel`` was set during the search.
        """
        if not target:
            msg = "Target identifier cannot be empty, use enumerate() to walk every node"
            raise InvalidTargetError(msg)

        policy = policy or TraversalPolicy()
        rule = self.match_rule
        stack = self._stack_factory()
        walk = _Walk(stack, lambda identity: rule.matches(target, identity), cancel=cancel)

        logger.debug("Searching for {!r} ({}, {})", target, rule.value, policy)
        start = provider.root_node() if root is None else root
        if walk.visit(provider, start, 0, policy):
            result = SearchResult(found=True, path=stack.snapshot())
            logger.debug("Found {!r} at depth {}", target, len(result.path) - 1)
            return result

        logger.debug("No node matched {!r}", target)
        return NOT_FOUND

    def enumerate(
        self,
        provider: HierarchyProvider,
        *,
        policy: TraversalPolicy | None = None,
        root: Any = None,
        cancel: CancelSignal | None = None,
    ) -> list[SearchPath]:
        """Walk the whole hierarchy and return the path of every concrete node.

        Paths are returned in the order the nodes are visited, which is the
        order a search would consider them.
        """
        policy = policy or TraversalPolicy()
        visited: list[SearchPath] = []
        walk = _Walk(self._stack_factory(), _never, cancel=cancel, visited=visited)

        start = provider.root_node() if root is None else root
        walk.visit(provider, start, 0, policy)
        logger.debug("Enumerated {} nodes", len(visited))
        return visited

    def contains_display_name(
        self,
        provider: HierarchyProvider,
        display_name: str,
        *,
        root: Any = None,
        cancel: CancelSignal | None = None,
    ) -> bool:
        """Return True if any node is labelled ``display_name`` (case-insensitive).

        Raises:
            InvalidTargetError: ``display_name`` is empty.
        """
        if not display_name:
            msg = "Display name cannot be an empty string"
            raise InvalidTargetError(msg)

        wanted = display_name.casefold()
        walk = _Walk(
            self._stack_factory(),
            lambda identity: identity.display_name.casefold() == wanted,
            cancel=cancel,
        )
        start = provider.root_node() if root is None else root
        return walk.visit(provider, start, 0, TraversalPolicy())
