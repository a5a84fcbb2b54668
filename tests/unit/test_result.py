"""
Tests for the Result contract.

Tests cover:
  - Success/Failure creation and introspection
  - Value-based equality and pattern matching
  - map, flat_map, ensure transformations
  - Side effects and recovery
  - Static factories
"""

from __future__ import annotations

import pytest

from stepwise import Failure, Result, Success


# ═══════════════════════════════════════════════════════════════
# 1. Creation & Introspection
# ═══════════════════════════════════════════════════════════════


class TestSuccessCreation:
    def test_success_wraps_value(self):
        result = Result.success(42)
        assert result.is_success()
        assert not result.is_failure()
        assert result.value() == 42

    def test_success_accepts_none(self):
        assert Success(None).value() is None

    def test_success_keeps_sequences_whole(self):
        assert Success([1, 2]).value() == [1, 2]

    def test_success_is_truthy(self):
        assert Success(0)


class TestFailureCreation:
    def test_failure_carries_any_payload(self):
        result = Result.failure(("invalid", {"name": ["must be filled"]}))
        assert result.is_failure()
        assert result.error() == ("invalid", {"name": ["must be filled"]})

    def test_failure_is_falsy(self):
        assert not Failure("boom")


class TestValueExtraction:
    def test_value_on_failure_raises(self):
        with pytest.raises(ValueError, match="Cannot get value from a Failure"):
            Failure("missing").value()

    def test_error_on_success_raises(self):
        with pytest.raises(ValueError, match="Cannot get error from a Success"):
            Success(42).error()

    def test_value_or(self):
        assert Success(1).value_or(0) == 1
        assert Failure("x").value_or(0) == 0


# ═══════════════════════════════════════════════════════════════
# 2. Equality, repr & pattern matching
# ═══════════════════════════════════════════════════════════════


class TestEquality:
    def test_value_based(self):
        assert Success([1, 2]) == Success([1, 2])
        assert Failure("x") == Failure("x")

    def test_variants_never_equal(self):
        assert Success("x") != Failure("x")

    def test_hashable_payloads_hash(self):
        assert {Success(1), Success(1), Failure(1)} == {Success(1), Failure(1)}

    def test_repr(self):
        assert repr(Success([1])) == "Success([1])"
        assert repr(Failure("boom")) == "Failure('boom')"


class TestPatternMatching:
    def test_success_binds_whole_payload(self):
        match Success([1, 2]):
            case Success(value):
                assert value == [1, 2]
            case _:
                pytest.fail("expected Success")

    def test_failure_with_nested_pattern(self):
        match Failure(("invalid", "details")):
            case Failure(("invalid", details)):
                assert details == "details"
            case _:
                pytest.fail("expected Failure")


# ═══════════════════════════════════════════════════════════════
# 3. Transformations
# ═══════════════════════════════════════════════════════════════


class TestMap:
    def test_map_transforms_success_value(self):
        assert Success(5).map(lambda x: x * 2) == Success(10)

    def test_map_short_circuits_on_failure(self):
        assert Failure("bad").map(lambda x: x * 2) == Failure("bad")

    def test_map_failure(self):
        assert Failure("bad").map_failure(str.upper) == Failure("BAD")
        assert Success(1).map_failure(str.upper) == Success(1)


class TestFlatMap:
    def test_flat_map_chains(self):
        def half(x: int) -> Result[int, str]:
            return Success(x // 2) if x % 2 == 0 else Failure("odd")

        assert Success(8).flat_map(half).flat_map(half) == Success(2)
        assert Success(6).flat_map(half).flat_map(half) == Failure("odd")

    def test_ensure(self):
        assert Success(5).ensure(lambda x: x > 0, "negative") == Success(5)
        assert Success(-1).ensure(lambda x: x > 0, "negative") == Failure("negative")


class TestSideEffectsAndRecovery:
    def test_peek_runs_on_success_only(self):
        seen: list[int] = []
        Success(1).peek(seen.append)
        Failure(2).peek(seen.append)
        assert seen == [1]

    def test_peek_failure_runs_on_failure_only(self):
        seen: list[str] = []
        Success("a").peek_failure(seen.append)
        Failure("b").peek_failure(seen.append)
        assert seen == ["b"]

    def test_recover(self):
        assert Failure("x").recover(lambda e: f"default-{e}") == Success("default-x")

    def test_either(self):
        assert Success(1).either(lambda v: v + 1, lambda e: 0) == 2
        assert Failure("e").either(lambda v: v + 1, lambda e: 0) == 0

    def test_get_or_else_get(self):
        assert Failure("e").get_or_else_get(len) == 1


# ═══════════════════════════════════════════════════════════════
# 4. Static factories
# ═══════════════════════════════════════════════════════════════


class TestFactories:
    def test_from_computation_success(self):
        assert Result.from_computation(lambda: 1 + 1, str) == Success(2)

    def test_from_computation_maps_exception(self):
        def boom() -> int:
            raise RuntimeError("exploded")

        assert Result.from_computation(boom, str) == Failure("exploded")

    def test_from_optional(self):
        assert Result.from_optional(None, "missing") == Failure("missing")
        assert Result.from_optional(0, "missing") == Success(0)

    def test_combine(self):
        assert Result.combine(Success(1), Success(2), lambda a, b: a + b) == Success(3)
        assert Result.combine(Success(1), Failure("b"), lambda a, b: a + b) == Failure("b")

    def test_all_of_returns_first_failure(self):
        assert Result.all_of([Success(1), Failure("a"), Failure("b")]) == Failure("a")
        assert Result.all_of([Success(1), Success(2)]) == Success([1, 2])
