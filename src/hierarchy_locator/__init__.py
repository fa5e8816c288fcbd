"""Locate items in nested project hierarchies and select them in a tree widget."""

from hierarchy_locator.core.navigator import LocateCommand, locate_and_select
from hierarchy_locator.core.search.engine import HierarchySearchEngine
from hierarchy_locator.core.tree.replay import replay_and_select, select_root
from hierarchy_locator.models.node import (
    MatchRule,
    NestedHierarchy,
    NodeIdentity,
    SearchResult,
    TraversalPolicy,
)
from hierarchy_locator.protocols import HierarchyProvider, WidgetTree

__all__ = [
    "HierarchyProvider",
    "HierarchySearchEngine",
    "LocateCommand",
    "MatchRule",
    "NestedHierarchy",
    "NodeIdentity",
    "SearchResult",
    "TraversalPolicy",
    "WidgetTree",
    "locate_and_select",
    "replay_and_select",
    "select_root",
]
