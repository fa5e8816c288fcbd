"""Exceptions raised by the hierarchy search engine and its providers."""

from typing import Any


class HierarchyLocatorError(Exception):
    """Base class for all hierarchy-locator errors."""


class ProviderQueryError(HierarchyLocatorError):
    """Raised when a provider query fails for a reason other than "no more".

    Attributes:
        operation: Name of the provider call that failed.
        node: The node handle the call was made with.
    """

    def __init__(self, operation: str, node: Any, reason: str = "") -> None:
        self.operation = operation
        self.node = node
        msg = f"Provider query {operation!r} failed for node {node!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidTargetError(HierarchyLocatorError, ValueError):
    """Raised when an empty name is passed where a specific match is required."""


class SearchCancelledError(HierarchyLocatorError):
    """Raised when cooperative cancellation is observed mid-traversal.

    Attributes:
        depth: Number of identities on the path stack when cancellation was seen.
    """

    def __init__(self, depth: int) -> None:
        self.depth = depth
        super().__init__(f"Search cancelled at depth {depth}")
