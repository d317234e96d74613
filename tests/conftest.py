"""Shared test fixtures for harness annotations.

Provides a deterministic clock, a harness context, and file-backed and
in-memory envelope stores.
"""

from datetime import datetime, timedelta, timezone

import pytest

from harness_annotations.engine.merge import MergeEngine
from harness_annotations.models.config import HarnessContext
from harness_annotations.storage.json_file import JsonFileEnvelopeStore
from harness_annotations.storage.memory import InMemoryEnvelopeStore


class TickingClock:
    """Returns a time one step later on every call."""

    def __init__(self, start: datetime, step: timedelta) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + self.step
        return now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(
        datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc),
        timedelta(seconds=1),
    )


@pytest.fixture
def engine(clock) -> MergeEngine:
    return MergeEngine(clock=clock)


@pytest.fixture
def harness() -> HarnessContext:
    return HarnessContext(execution_id="exec-001", step_id="step-build")


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "annotations.json"


@pytest.fixture
def file_store(store_path) -> JsonFileEnvelopeStore:
    return JsonFileEnvelopeStore(store_path)


@pytest.fixture
def memory_store() -> InMemoryEnvelopeStore:
    return InMemoryEnvelopeStore()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove HARNESS_* variables inherited from the host environment."""
    for var in (
        "HARNESS_ANNOTATIONS_FILE",
        "HARNESS_ANNOTATIONS_STRICT",
        "HARNESS_EXECUTION_ID",
        "HARNESS_STEP_ID",
        "HARNESS_ACCOUNT_ID",
        "HARNESS_PROJECT_ID",
        "HARNESS_ORG_ID",
        "HARNESS_PIPELINE_ID",
        "HARNESS_STAGE_ID",
        "HARNESS_STAGE_UUID",
    ):
        monkeypatch.delenv(var, raising=False)
