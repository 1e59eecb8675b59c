import unittest

import pytest

from circuit_weave.circuit import Outcome
from circuit_weave.core.errors import InactiveScopeError, ValidationError
from circuit_weave.core.rng import RNGStreamRegistry
from circuit_weave.geometry import (
    AdjacentPair,
    Bricklayer,
    SingleSite,
    StaircaseRight,
)
from circuit_weave.operation import Gate, GateType
from circuit_weave.state import StateScope, TraceState, with_state

HAAR = Gate(GateType.HaarRandom)
RESET = Gate(GateType.Reset)


def make_state(size=4, topology="periodic", seed=0):
    registry = RNGStreamRegistry.create(
        ctrl=seed, proj=seed + 1, haar=seed + 2, born=seed + 3
    )
    return TraceState(size, topology, rng_registry=registry)


class TestStateScope(unittest.TestCase):

    def test_apply_inside_scope(self) -> None:
        state = make_state()
        with StateScope(state) as scope:
            self.assertTrue(scope.active)
            self.assertIs(scope.state, state)
            scope.apply(RESET, SingleSite(2))
            scope.apply(HAAR, Bricklayer("odd"))
            scope.record()
        self.assertEqual(
            [a.sites for a in state.applied], [(2,), (1, 2), (3, 4)]
        )
        self.assertEqual(state.captures, 1)

    def test_unbound_after_exit(self) -> None:
        state = make_state()
        with StateScope(state) as scope:
            pass
        self.assertFalse(scope.active)
        with self.assertRaises(InactiveScopeError):
            scope.apply(RESET, SingleSite(1))
        with self.assertRaises(InactiveScopeError):
            scope.record()
        with self.assertRaises(InactiveScopeError):
            scope.state

    def test_unbound_after_exception(self) -> None:
        scope = StateScope(make_state())
        with self.assertRaises(RuntimeError):
            with scope:
                raise RuntimeError("boom")
        self.assertFalse(scope.active)
        with self.assertRaises(InactiveScopeError):
            scope.record()

    def test_not_usable_before_enter(self) -> None:
        with self.assertRaises(InactiveScopeError):
            StateScope(make_state()).apply(RESET, SingleSite(1))

    def test_cannot_bind_twice(self) -> None:
        scope = StateScope(make_state())
        with scope:
            with self.assertRaises(ValidationError):
                scope.__enter__()

    def test_staircase_advances_per_apply(self) -> None:
        state = make_state()
        stair = StaircaseRight(4)
        with StateScope(state) as scope:
            scope.apply(HAAR, stair)
            scope.apply(HAAR, stair)
        self.assertEqual([a.sites for a in state.applied], [(4, 1), (1, 2)])

    def test_binding_is_validated(self) -> None:
        with StateScope(make_state()) as scope:
            with self.assertRaises(ValidationError):
                scope.apply(HAAR, SingleSite(1))

    def test_size_and_topology_required(self) -> None:
        class Bare:
            def apply_gate(self, gate, sites):
                pass

            def capture_observation(self):
                pass

        with self.assertRaises(ValidationError):
            StateScope(Bare())
        StateScope(Bare(), size=4, topology="open")


class TestScopedApplyWithProb(unittest.TestCase):

    def test_one_draw_per_call(self) -> None:
        state = make_state()
        with StateScope(state) as scope:
            for _ in range(10):
                scope.apply_with_prob([(0.5, RESET, SingleSite(1))], stream="proj")
        self.assertEqual(state.rng_registry.draw_count("proj"), 10)
        self.assertEqual(state.rng_registry.draw_count("ctrl"), 0)

    def test_returns_selected_outcome(self) -> None:
        state = make_state()
        with StateScope(state) as scope:
            outcome = scope.apply_with_prob([(1.0, HAAR, AdjacentPair(4))])
        self.assertEqual(outcome, Outcome(1.0, HAAR, AdjacentPair(4)))
        self.assertEqual([a.sites for a in state.applied], [(4, 1)])

    def test_noop_returns_none(self) -> None:
        state = make_state()
        with StateScope(state) as scope:
            outcome = scope.apply_with_prob([(1e-12, HAAR, AdjacentPair(1))])
        self.assertIsNone(outcome)
        self.assertEqual(state.applied, [])

    def test_invalid_outcomes_take_no_draw(self) -> None:
        state = make_state()
        with StateScope(state) as scope:
            with self.assertRaises(ValidationError):
                scope.apply_with_prob([(0.7, RESET, SingleSite(1))] * 2)
        self.assertEqual(state.rng_registry.draw_count("ctrl"), 0)

    def test_matches_draws_of_an_equal_registry(self) -> None:
        state = make_state(seed=8)
        reference = RNGStreamRegistry.create(ctrl=8, proj=9, haar=10, born=11)
        with StateScope(state) as scope:
            for _ in range(20):
                applied = scope.apply_with_prob([(0.5, RESET, SingleSite(1))])
                expected = reference.draw_uniform("ctrl") < 0.5
                self.assertEqual(applied is not None, expected)

    def test_explicit_registry(self) -> None:
        registry = RNGStreamRegistry.create(ctrl=1, proj=1, haar=1, born=1)
        state = TraceState(4)
        with StateScope(state, registry=registry) as scope:
            scope.apply_with_prob([(0.5, RESET, SingleSite(1))])
        self.assertEqual(registry.draw_count("ctrl"), 1)

    def test_missing_registry(self) -> None:
        with StateScope(TraceState(4)) as scope:
            with self.assertRaises(ValidationError):
                scope.apply_with_prob([(0.5, RESET, SingleSite(1))])


def test_with_state_returns_result_and_unbinds():
    state = make_state()
    captured = {}

    def body(scope):
        captured["scope"] = scope
        scope.apply(RESET, SingleSite(3))
        return "done"

    assert with_state(state, body) == "done"
    assert state.applied[0].sites == (3,)
    with pytest.raises(InactiveScopeError):
        captured["scope"].record()


def test_with_state_unbinds_on_error():
    captured = {}

    def body(scope):
        captured["scope"] = scope
        raise KeyError("missing")

    with pytest.raises(KeyError):
        with_state(make_state(), body)
    assert not captured["scope"].active
