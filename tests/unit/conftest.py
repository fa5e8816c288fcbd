"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from hierarchy_locator.core.snapshot.reader import Snapshot, parse_snapshot
from tests.unit.fakes import SAMPLE_SNAPSHOT, FakeProvider, make


@pytest.fixture
def scenario_a() -> FakeProvider:
    """Root -> [Src -> [a.txt], Docs -> [b.txt]]."""
    return FakeProvider(
        make(
            "Root",
            "proj",
            make("Src", "proj/src", make("a.txt", "proj/a.txt")),
            make("Docs", "proj/docs", make("b.txt", "proj/b.txt")),
        )
    )


@pytest.fixture
def snapshot() -> Snapshot:
    return parse_snapshot(SAMPLE_SNAPSHOT)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "hierarchy.json"
    path.write_text(json.dumps(SAMPLE_SNAPSHOT))
    return path
