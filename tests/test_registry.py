"""Tests for the check registry."""

from __future__ import annotations

import pytest

from vigil.health.errors import InvalidCheckError
from vigil.health.registry import CheckRegistry, check_name, validate_check


class RecordingCheck:
    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, context) -> None:
        context.add_message(self.name, True)


# ── Validation ───────────────────────────────────────────────────────────────


class TestValidateCheck:
    def test_accepts_lambda(self) -> None:
        validate_check(lambda ctx: None)

    def test_accepts_callable_instance(self) -> None:
        validate_check(RecordingCheck("db"))

    def test_accepts_extra_defaulted_params(self) -> None:
        def check(ctx, retries=3):
            pass

        validate_check(check)

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(InvalidCheckError):
            validate_check("not a check")

    def test_rejects_zero_args(self) -> None:
        with pytest.raises(InvalidCheckError):
            validate_check(lambda: None)

    def test_rejects_two_required_args(self) -> None:
        with pytest.raises(InvalidCheckError):
            validate_check(lambda ctx, other: None)

    def test_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            validate_check(42)


class TestCheckName:
    def test_name_attribute_wins(self) -> None:
        assert check_name(RecordingCheck("db")) == "db"

    def test_function_name(self) -> None:
        def disk_space(ctx):
            pass

        assert check_name(disk_space) == "disk_space"

    def test_falls_back_to_class_name(self) -> None:
        class Probe:
            def __call__(self, ctx):
                pass

        assert check_name(Probe()) == "Probe"


# ── Registry ─────────────────────────────────────────────────────────────────


class TestCheckRegistry:
    def test_add_returns_registry(self) -> None:
        registry = CheckRegistry()
        assert registry.add(lambda ctx: None) is registry

    def test_insertion_order(self) -> None:
        registry = CheckRegistry()
        checks = [RecordingCheck(f"c{i}") for i in range(5)]
        for c in checks:
            registry.add(c)
        assert registry.snapshot() == tuple(checks)

    def test_same_instance_registered_once(self) -> None:
        registry = CheckRegistry()
        check = RecordingCheck("db")
        registry.add(check).add(check)
        assert len(registry) == 1
        assert check in registry

    def test_equal_but_distinct_instances_both_kept(self) -> None:
        registry = CheckRegistry()
        registry.add(RecordingCheck("db")).add(RecordingCheck("db"))
        assert len(registry) == 2

    def test_invalid_check_not_registered(self) -> None:
        registry = CheckRegistry()
        with pytest.raises(InvalidCheckError):
            registry.add(object())
        assert len(registry) == 0

    def test_clear(self) -> None:
        registry = CheckRegistry()
        registry.add(lambda ctx: None).add(lambda ctx: None)
        assert registry.clear() is registry
        assert registry.snapshot() == ()

    def test_snapshot_unaffected_by_later_mutation(self) -> None:
        registry = CheckRegistry()
        first = RecordingCheck("a")
        registry.add(first)
        snap = registry.snapshot()

        registry.add(RecordingCheck("b"))
        registry.clear()

        assert snap == (first,)

    def test_contains_unregistered(self) -> None:
        assert RecordingCheck("x") not in CheckRegistry()
