"""Domain models for hierarchy search and path replay."""

import enum
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from hierarchy_locator.config import PATH_SEPARATOR


@dataclass(frozen=True)
class NodeIdentity:
    """Names captured for a concrete node during a search."""

    canonical_name: str
    display_name: str

    def __str__(self) -> str:
        return f"{self.display_name} ({self.canonical_name})"


SearchPath = tuple[NodeIdentity, ...]


@dataclass(frozen=True)
class TraversalPolicy:
    """Child enumeration rules for one search call."""

    visible_only: bool = False
    root_is_solution_root: bool = True

    def uses_visible_enumeration(self, depth: int) -> bool:
        """Whether children at ``depth`` are enumerated from the visible set.

        The immediate children of the absolute root (depth 1) are always limited
        to what the explorer displays.
        """
        return self.visible_only or (self.root_is_solution_root and depth == 1)

    def for_nested(self) -> "TraversalPolicy":
        """Policy for a delegated subtree, which is never the solution root."""
        return replace(self, root_is_solution_root=False)


class MatchRule(enum.Enum):
    """How a target identifier is compared with a node's canonical name."""

    EXACT = "exact"
    SUFFIX = "suffix"

    def matches(self, target: str, identity: NodeIdentity) -> bool:
        canonical = identity.canonical_name
        if not canonical:
            return False
        if self is MatchRule.SUFFIX:
            return target.casefold().endswith(canonical.casefold())
        return target.casefold() == canonical.casefold()


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a search: whether a node matched, and the path to it."""

    found: bool
    path: SearchPath = ()

    @property
    def leaf(self) -> NodeIdentity | None:
        return self.path[-1] if self.path else None

    @property
    def display_names(self) -> tuple[str, ...]:
        return tuple(identity.display_name for identity in self.path)

    def describe(self, separator: str = PATH_SEPARATOR) -> str:
        """Render the path as ``"display (canonical)"`` segments joined by ``separator``."""
        return separator.join(str(identity) for identity in self.path)


NOT_FOUND = SearchResult(found=False)


@dataclass
class NestedHierarchy:
    """A subtree handed off to another provider.

    The handle is borrowed for a single recursive call; ``close`` releases it
    and is safe to call more than once.
    """

    provider: Any
    root: Any
    on_release: Callable[[], None] | None = None
    _released: bool = field(default=False, init=False, repr=False)

    def close(self) -> None:
        if self._released:
            return
        self._released = True
        if self.on_release is not None:
            self.on_release()
