"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from dblayer.models import (
    EventContext,
    PendingContext,
    QueryResult,
    Result,
    SettledContext,
)


class TestPendingContext:
    """Tests for PendingContext."""

    def test_create_sets_start_only(self):
        """Test that a new context has a start and no outcome."""
        before = datetime.now(timezone.utc)
        ctx = PendingContext.create(is_transaction=False, tag="load")
        after = datetime.now(timezone.utc)

        assert before <= ctx.start <= after
        assert ctx.finish is None
        assert ctx.success is None
        assert ctx.result is None
        assert ctx.tag == "load"
        assert ctx.level == 0
        assert ctx.parent is None

    def test_nested_level_and_parent(self):
        """Test that a nested context points back to its parent."""
        outer = PendingContext.create(is_transaction=False)
        inner = PendingContext.create(is_transaction=True, parent=outer)

        assert inner.level == 1
        assert inner.parent is outer
        assert inner.is_transaction

    def test_is_immutable(self):
        """Test that contexts cannot be modified."""
        ctx = PendingContext.create(is_transaction=False)
        with pytest.raises(AttributeError):
            ctx.tag = "other"


class TestSettledContext:
    """Tests for settling a context."""

    def test_settle_success(self):
        """Test settling with a resolved value."""
        ctx = PendingContext.create(is_transaction=True, tag=7, context="obj")
        settled = ctx.settle(True, 42)

        assert isinstance(settled, SettledContext)
        assert settled.finish is not None
        assert settled.finish >= settled.start
        assert settled.start == ctx.start
        assert settled.success is True
        assert settled.result == 42
        assert settled.tag == 7
        assert settled.context == "obj"
        assert settled.is_transaction
        assert settled.duration >= 0

    def test_settle_failure(self):
        """Test settling with an error."""
        err = ValueError("bad")
        settled = PendingContext.create(is_transaction=False).settle(False, err)

        assert settled.success is False
        assert settled.result is err

    def test_settle_leaves_pending_untouched(self):
        """Test that the start context keeps describing the start."""
        ctx = PendingContext.create(is_transaction=False)
        ctx.settle(True, None)
        assert ctx.finish is None


class TestEventContext:
    """Tests for EventContext."""

    def test_defaults(self):
        """Test that all fields are optional."""
        e = EventContext()
        assert e.client is None
        assert e.query is None
        assert e.params is None
        assert e.task_context is None
        assert e.cn is None

    def test_with_task_context(self):
        """Test copying with another task context."""
        ctx = PendingContext.create(is_transaction=False)
        e = EventContext(client="c", query="select 1")
        bound = e.with_task_context(ctx)

        assert bound.task_context is ctx
        assert bound.query == "select 1"
        assert e.task_context is None


class TestQueryResult:
    """Tests for the QueryResult mask."""

    def test_any_is_many_or_none(self):
        """Test that ANY combines MANY and NONE."""
        assert QueryResult.ANY == QueryResult.MANY | QueryResult.NONE
        assert not QueryResult.ANY & QueryResult.ONE

    def test_result_defaults(self):
        """Test creating an empty Result."""
        result = Result()
        assert result.rows == []
        assert result.row_count == 0
        assert result.columns == []
