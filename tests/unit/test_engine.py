"""Tests for the hierarchy search engine."""

import threading

import pytest

from hierarchy_locator.core.search.engine import HierarchySearchEngine
from hierarchy_locator.errors import InvalidTargetError, ProviderQueryError, SearchCancelledError
from hierarchy_locator.models.node import MatchRule, NodeIdentity, TraversalPolicy
from tests.unit.fakes import CountingStack, FakeProvider, make


def _names(path: tuple[NodeIdentity, ...]) -> list[str]:
    return [identity.display_name for identity in path]


def test_finds_nested_file_with_full_ancestor_path(scenario_a: FakeProvider) -> None:
    result = HierarchySearchEngine().search(scenario_a, "proj/b.txt")
    assert result.found is True
    assert _names(result.path) == ["Root", "Docs", "b.txt"]
    assert result.leaf == NodeIdentity("proj/b.txt", "b.txt")


def test_missing_target_returns_empty_path(scenario_a: FakeProvider) -> None:
    result = HierarchySearchEngine().search(scenario_a, "proj/missing.txt")
    assert result.found is False
    assert result.path == ()


def test_match_is_case_insensitive(scenario_a: FakeProvider) -> None:
    result = HierarchySearchEngine().search(scenario_a, "PROJ/A.TXT")
    assert _names(result.path) == ["Root", "Src", "a.txt"]


def test_root_itself_can_match(scenario_a: FakeProvider) -> None:
    result = HierarchySearchEngine().search(scenario_a, "proj")
    assert _names(result.path) == ["Root"]
    assert not scenario_a.queried("Src")


def test_empty_target_is_rejected(scenario_a: FakeProvider) -> None:
    with pytest.raises(InvalidTargetError):
        HierarchySearchEngine().search(scenario_a, "")
    assert scenario_a.calls == []


def test_first_match_wins_and_later_subtree_is_not_queried() -> None:
    provider = FakeProvider(
        make(
            "Root",
            "",
            make("First", "", make("dup-1", "dup")),
            make("Second", "", make("dup-2", "dup", make("below-2", "x"))),
        )
    )
    result = HierarchySearchEngine().search(provider, "dup")
    assert _names(result.path) == ["Root", "First", "dup-1"]
    assert not provider.queried("Second")
    assert not provider.queried("dup-2")
    assert not provider.queried("below-2")


def test_sibling_enumeration_stops_at_match() -> None:
    provider = FakeProvider(make("Root", "", make("a", "a"), make("b", "b"), make("c", "c")))
    HierarchySearchEngine().search(provider, "b")
    assert ("get_next_sibling", "b") not in provider.calls
    assert not provider.queried("c")


def test_delegating_node_is_transparent() -> None:
    nested = FakeProvider(make("P2Root", "p2", make("x", "x")))
    provider = FakeProvider(make("Root", "root", make("Embedded", "embedded", nested=nested)))

    result = HierarchySearchEngine().search(provider, "x")

    assert result.found is True
    assert _names(result.path) == ["Root", "P2Root", "x"]
    assert "Embedded" not in _names(result.path)
    assert provider.acquired == provider.released == 1


def test_delegation_takes_precedence_over_direct_match() -> None:
    nested = FakeProvider(make("Inner", "inner"))
    provider = FakeProvider(make("Root", "", make("Embedded", "target", nested=nested)))

    result = HierarchySearchEngine().search(provider, "target")

    assert result.found is False
    assert ("get_canonical_name", "Embedded") not in provider.calls


def test_nested_handle_released_when_not_found() -> None:
    nested = FakeProvider(make("P2Root", "p2", make("y", "y")))
    provider = FakeProvider(make("Root", "", make("Embedded", "", nested=nested)))

    result = HierarchySearchEngine().search(provider, "nope")

    assert result.found is False
    assert provider.acquired == provider.released == 1


def test_provider_error_propagates_and_releases_nested_handle() -> None:
    nested = FakeProvider(make("P2Root", "p2", make("y", "y")))
    nested.fail_on("get_first_child", "y")
    provider = FakeProvider(make("Root", "", make("Embedded", "", nested=nested)))
    stacks: list[CountingStack] = []

    def factory() -> CountingStack:
        stack = CountingStack()
        stacks.append(stack)
        return stack

    with pytest.raises(ProviderQueryError) as exc_info:
        HierarchySearchEngine(stack_factory=factory).search(provider, "nope")

    assert exc_info.value.operation == "get_first_child"
    assert provider.acquired == provider.released == 1
    assert len(stacks[0]) == 0
    assert stacks[0].pushes == stacks[0].pops


def test_stack_is_empty_after_not_found(scenario_a: FakeProvider) -> None:
    stacks: list[CountingStack] = []

    def factory() -> CountingStack:
        stack = CountingStack()
        stacks.append(stack)
        return stack

    HierarchySearchEngine(stack_factory=factory).search(scenario_a, "proj/missing.txt")

    (stack,) = stacks
    assert len(stack) == 0
    assert stack.pushes == stack.pops == 5


def test_visible_only_skips_hidden_nodes_at_every_level() -> None:
    provider = FakeProvider(
        make(
            "Root",
            "",
            make("Folder", "", make("ghost", "ghost", hidden=True), make("shown", "shown")),
        )
    )
    engine = HierarchySearchEngine()

    assert engine.search(provider, "ghost", policy=TraversalPolicy(visible_only=True)).found is False
    assert engine.search(provider, "shown", policy=TraversalPolicy(visible_only=True)).found is True
    assert engine.search(provider, "ghost", policy=TraversalPolicy(visible_only=False)).found is True


def test_root_children_are_visible_only_for_solution_root() -> None:
    provider = FakeProvider(make("Root", "", make("hidden-top", "top", hidden=True)))
    engine = HierarchySearchEngine()

    assert engine.search(provider, "top").found is False
    policy = TraversalPolicy(root_is_solution_root=False)
    assert engine.search(provider, "top", policy=policy).found is True


def test_nested_root_is_never_solution_root() -> None:
    nested = FakeProvider(make("P2Root", "", make("hidden-child", "hc", hidden=True)))
    provider = FakeProvider(make("Outer", "", nested=nested))

    result = HierarchySearchEngine().search(provider, "hc")

    assert _names(result.path) == ["P2Root", "hidden-child"]


def test_suffix_rule_matches_end_of_target() -> None:
    provider = FakeProvider(make("Root", "", make("Program.cs", "Program.cs")))
    engine = HierarchySearchEngine(match_rule=MatchRule.SUFFIX)

    result = engine.search(provider, r"C:\src\app\PROGRAM.cs")

    assert _names(result.path) == ["Root", "Program.cs"]


def test_empty_canonical_name_never_matches() -> None:
    provider = FakeProvider(make("Root", "", make("unnamed", "")))
    engine = HierarchySearchEngine(match_rule=MatchRule.SUFFIX)
    assert engine.search(provider, "anything").found is False


def test_cancel_before_start_raises() -> None:
    provider = FakeProvider(make("Root", "root"))
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(SearchCancelledError) as exc_info:
        HierarchySearchEngine().search(provider, "root", cancel=cancel)

    assert exc_info.value.depth == 0
    assert provider.calls == []


class _CancelAfter:
    """Reports cancellation after a number of checks."""

    def __init__(self, checks: int) -> None:
        self.remaining = checks

    def is_set(self) -> bool:
        self.remaining -= 1
        return self.remaining < 0


def test_cancel_mid_search_unwinds_stack_and_releases_handles() -> None:
    nested = FakeProvider(make("P2Root", "", make("a", "a"), make("b", "b")))
    provider = FakeProvider(make("Root", "", make("Embedded", "", nested=nested)))
    stacks: list[CountingStack] = []

    def factory() -> CountingStack:
        stack = CountingStack()
        stacks.append(stack)
        return stack

    # Root, Embedded, P2Root, a are visited; cancellation is seen before b.
    with pytest.raises(SearchCancelledError) as exc_info:
        HierarchySearchEngine(stack_factory=factory).search(
            provider, "missing", cancel=_CancelAfter(4)
        )

    assert exc_info.value.depth == 2
    assert len(stacks[0]) == 0
    assert provider.acquired == provider.released == 1


def test_enumerate_lists_every_node_in_walk_order(scenario_a: FakeProvider) -> None:
    paths = HierarchySearchEngine().enumerate(scenario_a)
    assert [_names(p) for p in paths] == [
        ["Root"],
        ["Root", "Src"],
        ["Root", "Src", "a.txt"],
        ["Root", "Docs"],
        ["Root", "Docs", "b.txt"],
    ]


def test_enumerate_respects_visibility() -> None:
    provider = FakeProvider(
        make("Root", "", make("A", "", make("hidden", "", hidden=True), make("shown", "")))
    )
    paths = HierarchySearchEngine().enumerate(provider, policy=TraversalPolicy(visible_only=True))
    assert [p[-1].display_name for p in paths] == ["Root", "A", "shown"]


def test_contains_display_name(scenario_a: FakeProvider) -> None:
    engine = HierarchySearchEngine()
    assert engine.contains_display_name(scenario_a, "B.TXT") is True
    assert engine.contains_display_name(scenario_a, "c.txt") is False


def test_contains_display_name_rejects_empty(scenario_a: FakeProvider) -> None:
    with pytest.raises(ValueError):
        HierarchySearchEngine().contains_display_name(scenario_a, "")
