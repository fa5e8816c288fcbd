"""Locate an item in a hierarchy and select it in the widget tree."""

from collections.abc import Callable
from typing import Any

from loguru import logger

from hierarchy_locator.config import PATH_SEPARATOR
from hierarchy_locator.core.search.engine import CancelSignal, HierarchySearchEngine
from hierarchy_locator.core.tree.replay import replay_and_select, select_root
from hierarchy_locator.errors import InvalidTargetError, ProviderQueryError, SearchCancelledError
from hierarchy_locator.models.node import MatchRule, SearchResult, TraversalPolicy
from hierarchy_locator.protocols import HierarchyProvider, WidgetTree


def locate_and_select(
    provider: HierarchyProvider,
    tree: WidgetTree,
    widget_root: Any,
    target: str,
    *,
    policy: TraversalPolicy | None = None,
    match_rule: MatchRule = MatchRule.EXACT,
    engine: HierarchySearchEngine | None = None,
    reset_to_root: bool = True,
    cancel: CancelSignal | None = None,
) -> SearchResult:
    """Search for ``target`` and, if found, replay the path onto ``tree``.

    Args:
        provider: Hierarchy to search.
        tree: Widget tree to expand and select in.
        widget_root: Node whose children are the widget's top-level items.
        target: Canonical name to look for.
        policy: Child enumeration rules.
        match_rule: Used when no ``engine`` is given.
        engine: Search engine to use instead of a fresh one.
        reset_to_root: Select the top-level item before replaying.
        cancel: Cancellation signal checked during the search.

    Returns:
        The search result; the widget is untouched when nothing was found.
    """
    engine = engine or HierarchySearchEngine(match_rule=match_rule)
    result = engine.search(provider, target, policy=policy, cancel=cancel)
    if not result.found:
        logger.debug("{!r} not found in hierarchy", target)
        return result

    logger.debug("Node path: {}", result.describe(PATH_SEPARATOR))
    if reset_to_root:
        select_root(tree, widget_root)
    replay_and_select(tree, widget_root, result.path)
    return result


class LocateCommand:
    """Command wrapper around ``locate_and_select`` with an enabled state.

    Failures during a search disable the command instead of propagating,
    since it is triggered opportunistically from the UI.
    """

    def __init__(
        self,
        provider: HierarchyProvider,
        tree: WidgetTree,
        widget_root: Any,
        target_source: Callable[[], str | None],
        *,
        policy: TraversalPolicy | None = None,
        match_rule: MatchRule = MatchRule.EXACT,
    ) -> None:
        self.provider = provider
        self.tree = tree
        self.widget_root = widget_root
        self.target_source = target_source
        self.policy = policy
        self.engine = HierarchySearchEngine(match_rule=match_rule)
        self.enabled = True

    def query_status(self) -> bool:
        """Enable the command only when there is something to locate."""
        self.enabled = bool(self.target_source())
        return self.enabled

    def invoke(self, cancel: CancelSignal | None = None) -> SearchResult | None:
        """Locate the current target; returns None if the command did not run."""
        if not self.enabled:
            return None

        target = self.target_source()
        if not target:
            self.enabled = False
            return None

        try:
            return locate_and_select(
                self.provider,
                self.tree,
                self.widget_root,
                target,
                policy=self.policy,
                engine=self.engine,
                cancel=cancel,
            )
        except (ProviderQueryError, SearchCancelledError, InvalidTargetError) as e:
            logger.warning("Locate {!r} not supported: {}", target, e)
            self.enabled = False
            return None
