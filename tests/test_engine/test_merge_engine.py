"""Tests for the merge engine.

Covers:
- Mode normalization (unknown and empty -> replace)
- Record creation for every mode, insertion order
- replace / append / delete branches on an existing record
- Priority stickiness and style/path overwrite rules
- First-write-wins execution identity
- Timestamp formatting and refresh
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from harness_annotations.engine.merge import MergeEngine, format_timestamp, normalize_mode
from harness_annotations.models.annotations import (
    AnnotateRequest,
    AnnotationMode,
    AnnotationRecord,
    StoreEnvelope,
)
from tests.strategies import non_empty_text


def _req(context: str = "build", **kwargs) -> AnnotateRequest:
    return AnnotateRequest(context_name=context, **kwargs)


def _seeded(engine: MergeEngine, **kwargs) -> StoreEnvelope:
    """Envelope with one 'build' record created through the engine."""
    env = StoreEnvelope()
    defaults = dict(style="info", summary_text="Hello", summary_source_path="a.md", priority=5)
    defaults.update(kwargs)
    engine.apply(env, _req(**defaults))
    return env


# ---------------------------------------------------------------------------
# Mode normalization
# ---------------------------------------------------------------------------


class TestNormalizeMode:
    @pytest.mark.parametrize("mode", ["replace", "append", "delete"])
    def test_known_modes(self, mode):
        assert normalize_mode(mode) == AnnotationMode(mode)

    @pytest.mark.parametrize("mode", ["", None, "merge", "APPEND", " append"])
    def test_other_values_become_replace(self, mode):
        assert normalize_mode(mode) is AnnotationMode.REPLACE

    def test_enum_passthrough(self):
        assert normalize_mode(AnnotationMode.DELETE) is AnnotationMode.DELETE


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


class TestFormatTimestamp:
    def test_utc_uses_z(self):
        moment = datetime(2026, 10, 18, 12, 30, 45, 999999, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2026-10-18T12:30:45Z"

    def test_offset_kept(self):
        moment = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2026-10-18T12:00:00+02:00"

    def test_naive_is_utc(self):
        assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05Z"

    def test_default_clock_produces_rfc3339(self):
        env = StoreEnvelope()
        record = MergeEngine().apply(env, _req())
        parsed = datetime.fromisoformat(record.timestamp.replace("Z", "+00:00"))
        assert parsed.tzinfo is not None


# ---------------------------------------------------------------------------
# Creating records
# ---------------------------------------------------------------------------


class TestCreate:
    def test_new_record_seeded_from_request(self, engine):
        env = StoreEnvelope()
        record = engine.apply(
            env,
            _req(style="info", summary_text="Hello", summary_source_path="s.md", priority=5, mode="replace"),
        )
        assert env.annotations == [record]
        assert record.context_name == "build"
        assert record.style == "info"
        assert record.summary == "Hello"
        assert record.summary_source_path == "s.md"
        assert record.priority == 5
        assert record.mode == "replace"
        assert record.timestamp == "2026-10-18T12:00:00Z"

    def test_unset_priority_stored_as_zero(self, engine):
        env = StoreEnvelope()
        assert engine.apply(env, _req()).priority == 0

    def test_negative_priority_stored_verbatim(self, engine):
        env = StoreEnvelope()
        assert engine.apply(env, _req(priority=-3)).priority == -3

    def test_empty_mode_recorded_as_replace(self, engine):
        env = StoreEnvelope()
        assert engine.apply(env, _req(mode="")).mode == "replace"

    def test_delete_on_missing_context_creates_record(self, engine):
        env = StoreEnvelope()
        record = engine.apply(env, _req(mode="delete"))
        assert env.contexts() == ["build"]
        assert record.mode == "delete"
        assert record.summary == ""

    def test_new_records_appended_in_order(self, engine):
        env = StoreEnvelope()
        for name in ["build", "test", "deploy"]:
            engine.apply(env, _req(name))
        assert env.contexts() == ["build", "test", "deploy"]

    def test_existing_record_keeps_position(self, engine):
        env = StoreEnvelope()
        for name in ["build", "test", "deploy"]:
            engine.apply(env, _req(name))
        engine.apply(env, _req("test", summary_text="again", mode="append"))
        assert env.contexts() == ["build", "test", "deploy"]
        assert env.annotations[1].summary == "again"

    def test_one_record_per_context(self, engine):
        env = StoreEnvelope()
        for mode in ["replace", "append", "delete", "append", "bogus"]:
            engine.apply(env, _req(mode=mode, summary_text="x"))
        assert env.contexts() == ["build"]


# ---------------------------------------------------------------------------
# Replace
# ---------------------------------------------------------------------------


class TestReplace:
    def test_overwrites_summary(self, engine):
        env = _seeded(engine)
        record = engine.apply(env, _req(summary_text="New", mode="replace"))
        assert record.summary == "New"
        assert record.mode == "replace"

    def test_empty_summary_clears(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(mode="replace")).summary == ""

    def test_empty_style_keeps_stored(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(mode="replace")).style == "info"

    def test_style_overwrites(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(style="error", mode="replace")).style == "error"

    def test_positive_priority_overwrites(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(priority=9, mode="replace")).priority == 9

    def test_negative_priority_does_not_overwrite(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(priority=-1, mode="replace")).priority == 5

    def test_source_path_rules(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(mode="replace")).summary_source_path == "a.md"
        assert engine.apply(env, _req(summary_source_path="b.md")).summary_source_path == "b.md"

    def test_unknown_mode_acts_as_replace(self, engine):
        env = _seeded(engine)
        record = engine.apply(env, _req(summary_text="X", mode="merge"))
        assert record.summary == "X"
        assert record.mode == "replace"

    def test_idempotent_except_timestamp(self, engine):
        env = StoreEnvelope()
        request = _req(style="info", summary_text="Hello", priority=5, mode="replace")
        first = engine.apply(env, request).model_copy()
        second = engine.apply(env, request)

        assert second.timestamp > first.timestamp
        assert second.model_dump(exclude={"timestamp"}) == first.model_dump(exclude={"timestamp"})


# ---------------------------------------------------------------------------
# Append
# ---------------------------------------------------------------------------


class TestAppend:
    def test_accumulates_with_newline(self, engine):
        env = StoreEnvelope()
        engine.apply(env, _req(summary_text="A", mode="append"))
        record = engine.apply(env, _req(summary_text="B", mode="append"))
        assert record.summary == "A\nB"
        assert record.mode == "append"

    def test_empty_summary_keeps_stored(self, engine):
        env = _seeded(engine)
        assert engine.apply(env, _req(mode="append")).summary == "Hello"

    def test_onto_empty_summary_sets_directly(self, engine):
        env = _seeded(engine, summary_text="")
        assert engine.apply(env, _req(summary_text="First", mode="append")).summary == "First"

    def test_style_priority_path_rules(self, engine):
        env = _seeded(engine)
        record = engine.apply(
            env, _req(style="warning", priority=8, summary_source_path="c.md", mode="append")
        )
        assert record.style == "warning"
        assert record.priority == 8
        assert record.summary_source_path == "c.md"

    @given(st.lists(non_empty_text, min_size=1, max_size=10))
    def test_append_sequence_joins_all(self, parts):
        engine = MergeEngine()
        env = StoreEnvelope()
        for part in parts:
            engine.apply(env, _req(summary_text=part, mode="append"))
        assert env.annotations[0].summary == "\n".join(parts)


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_clears_content_keeps_record(self, engine):
        env = _seeded(engine)
        record = engine.apply(env, _req(mode="delete", style="error", summary_text="ignored", priority=9))
        assert env.contexts() == ["build"]
        assert record.style == ""
        assert record.summary == ""
        assert record.priority == 0
        assert record.mode == "delete"

    def test_keeps_source_path(self, engine):
        env = _seeded(engine)
        record = engine.apply(env, _req(mode="delete", summary_source_path="other.md"))
        assert record.summary_source_path == "a.md"

    def test_refreshes_timestamp(self, engine):
        env = _seeded(engine)
        before = env.annotations[0].timestamp
        assert engine.apply(env, _req(mode="delete")).timestamp > before

    def test_append_after_delete_starts_fresh(self, engine):
        env = _seeded(engine)
        engine.apply(env, _req(mode="delete"))
        record = engine.apply(env, _req(summary_text="Fresh", mode="append"))
        assert record.summary == "Fresh"


# ---------------------------------------------------------------------------
# Priority stickiness and identity
# ---------------------------------------------------------------------------


class TestPriorityStickiness:
    @given(
        stored=st.integers(min_value=1, max_value=1000),
        incoming=st.one_of(st.none(), st.just(0)),
        mode=st.sampled_from(["replace", "append", "", "other"]),
    )
    def test_zero_or_none_keeps_priority(self, stored, incoming, mode):
        engine = MergeEngine()
        env = StoreEnvelope(annotations=[AnnotationRecord(context_name="c", priority=stored)])
        record = engine.apply(env, _req("c", priority=incoming, mode=mode))
        assert record.priority == stored

    def test_seven_survives_zero(self, engine):
        env = StoreEnvelope()
        engine.apply(env, _req("c", priority=7))
        engine.apply(env, _req("c", priority=0, mode="append", summary_text="more"))
        engine.apply(env, _req("c", priority=0, mode="replace"))
        assert env.annotations[0].priority == 7


class TestExecutionIdentity:
    def test_set_when_empty(self, engine):
        env = StoreEnvelope()
        engine.apply(env, _req(), execution_id="E1")
        assert env.plan_execution_id == "E1"

    def test_first_write_wins(self, engine):
        env = StoreEnvelope()
        engine.apply(env, _req(), execution_id="E1")
        engine.apply(env, _req("other"), execution_id="E2")
        assert env.plan_execution_id == "E1"

    def test_blank_identity_is_replaced(self, engine):
        env = StoreEnvelope(plan_execution_id="   ")
        engine.apply(env, _req(), execution_id="E1")
        assert env.plan_execution_id == "E1"

    def test_blank_incoming_ignored(self, engine):
        env = StoreEnvelope()
        engine.apply(env, _req(), execution_id="  ")
        assert env.plan_execution_id == ""
