import numpy as np
import pytest

from circuit_weave.circuit import CircuitBuilder, Outcome, draw_branch, select_branch
from circuit_weave.core.errors import UnknownStreamError
from circuit_weave.core.rng import RNGStreamRegistry
from circuit_weave.geometry import SingleSite
from circuit_weave.operation import Gate, GateType

A = Outcome(0.2, Gate(GateType.PauliX), SingleSite(1))
B = Outcome(0.3, Gate(GateType.PauliZ), SingleSite(2))


@pytest.mark.parametrize(
    "r, expected",
    [
        (0.0, A),
        (0.19, A),
        (0.2, B),  # a tie with the upper edge belongs to the next interval
        (0.49, B),
        (0.5, None),
        (0.99, None),
    ],
)
def test_select_branch_intervals(r, expected):
    assert select_branch([A, B], r) == expected


def test_select_branch_full_mass_has_no_noop():
    only = Outcome(1.0, Gate(GateType.Reset), SingleSite(1))
    assert select_branch([only], 0.999999) == only


def _registry(seed=3):
    return RNGStreamRegistry.create(ctrl=seed, proj=seed + 1, haar=seed + 2, born=seed + 3)


def test_draw_branch_takes_exactly_one_draw():
    operation = CircuitBuilder(4).apply_with_prob([A, B]).build().operations[0]
    registry = _registry()
    for n in range(1, 21):
        draw_branch(operation, registry)
        assert registry.draw_count("ctrl") == n
    assert registry.draw_count("proj") == 0


def test_draw_branch_uses_the_declared_stream():
    operation = (
        CircuitBuilder(4).apply_with_prob([A], stream="born").build().operations[0]
    )
    registry = _registry()
    draw_branch(operation, registry)
    assert registry.draw_count("born") == 1
    assert registry.draw_count("ctrl") == 0


def test_draw_branch_unknown_stream():
    operation = (
        CircuitBuilder(4).apply_with_prob([A], stream="nope").build().operations[0]
    )
    with pytest.raises(UnknownStreamError):
        draw_branch(operation, _registry())


def test_branch_frequencies_converge():
    operation = CircuitBuilder(4).apply_with_prob([A, B]).build().operations[0]
    registry = _registry(seed=17)
    n = 2000
    picks = [draw_branch(operation, registry) for _ in range(n)]
    freq_a = np.mean([p == A for p in picks])
    freq_b = np.mean([p == B for p in picks])
    freq_noop = np.mean([p is None for p in picks])
    assert abs(freq_a - 0.2) < 0.05
    assert abs(freq_b - 0.3) < 0.05
    assert abs(freq_noop - 0.5) < 0.05
