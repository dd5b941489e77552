"""Tests for the report context."""

from __future__ import annotations

from datetime import timedelta

import pytest

from vigil.health.context import UNKNOWN_REVISION, ReportContext
from vigil.health.errors import ErrorKind


class TestMutation:
    def test_add_error_appends_in_order(self) -> None:
        ctx = ReportContext()
        ctx.add_error("a").add_error("b").add_error("a")
        assert ctx.errors == ["a", "b", "a"]

    def test_add_error_accepts_error_kind(self) -> None:
        ctx = ReportContext()
        ctx.add_error(ErrorKind.DATABASE_UNAVAILABLE)
        assert ctx.errors == [ErrorKind.DATABASE_UNAVAILABLE]

    def test_add_message_last_write_wins(self) -> None:
        ctx = ReportContext()
        ctx.add_message("load", 1).add_message("load", 2)
        assert ctx.messages == {"load": 2}

    def test_messages_keep_insertion_order(self) -> None:
        ctx = ReportContext()
        ctx.add_message("b", "x").add_message("a", 1.5).add_message("c", False)
        assert list(ctx.messages) == ["b", "a", "c"]

    def test_chaining_returns_context(self) -> None:
        ctx = ReportContext()
        assert ctx.add_error("x") is ctx
        assert ctx.add_message("k", "v") is ctx

    @pytest.mark.parametrize("value", [[1, 2], {"a": 1}, None, object()])
    def test_add_message_rejects_structured_values(self, value) -> None:
        with pytest.raises(TypeError):
            ReportContext().add_message("bad", value)

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_add_message_rejects_bad_names(self, name) -> None:
        with pytest.raises(ValueError):
            ReportContext().add_message(name, 1)


class TestReadAccessors:
    def test_empty_context_is_ok(self) -> None:
        ctx = ReportContext()
        assert ctx.ok
        assert not ctx.has_errors()
        assert ctx.messages == {}
        assert ctx.errors == []

    def test_has_errors(self) -> None:
        ctx = ReportContext().add_error("down")
        assert ctx.has_errors()
        assert not ctx.ok

    def test_accessors_return_copies(self) -> None:
        ctx = ReportContext().add_message("k", 1).add_error("e")
        ctx.messages["other"] = 2
        ctx.errors.append("x")
        assert ctx.messages == {"k": 1}
        assert ctx.errors == ["e"]

    def test_time_is_utc(self) -> None:
        assert ReportContext().time().utcoffset() == timedelta(0)

    def test_time_is_read_at_call(self) -> None:
        ctx = ReportContext()
        assert ctx.time() <= ctx.time()


class TestRevision:
    def test_from_provider(self) -> None:
        assert ReportContext(lambda: "deadbeef").revision() == "deadbeef"

    def test_asked_on_every_call(self) -> None:
        values = iter(["r1", "r2"])
        ctx = ReportContext(lambda: next(values))
        assert ctx.revision() == "r1"
        assert ctx.revision() == "r2"

    def test_no_provider(self) -> None:
        assert ReportContext().revision() == UNKNOWN_REVISION

    def test_empty_revision(self) -> None:
        assert ReportContext(lambda: "").revision() == UNKNOWN_REVISION

    def test_failing_provider(self) -> None:
        def broken() -> str:
            raise RuntimeError("no git")

        assert ReportContext(broken).revision() == UNKNOWN_REVISION
