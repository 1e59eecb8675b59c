"""
An example, showing the control/unitary (CT) model on a periodic chain with
CircuitWeave: every step a staircase pointer either resets its pair of
sites or applies a Haar random unitary, chosen with one draw from the
control stream.

The circuit is previewed first, then executed on a `TraceState` both through
the circuit engine and imperatively through a `StateScope`. With the same
seeds both styles apply exactly the same gates.
"""

import os

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import numpy as np

from circuit_weave import (
    CircuitBuilder,
    Gate,
    GateType,
    RNGStreamRegistry,
    StaircaseRight,
    StateScope,
    TraceState,
    execute,
    expand_circuit,
)
from circuit_weave.logging import setup_logging

L = 4
STEPS = 50
P_CTRL = 0.3
SEEDS = {"ctrl": 42, "proj": 1, "haar": 2, "born": 3}


def ct_circuit(p_ctrl: float):
    pointer = StaircaseRight(1)
    return (
        CircuitBuilder(size=L, topology="periodic", steps=STEPS)
        .apply_with_prob(
            [
                (p_ctrl, Gate(GateType.Reset), pointer),
                (1 - p_ctrl, Gate(GateType.HaarRandom), pointer),
            ],
            stream="ctrl",
        )
        .build()
    )


def reset_fraction(state: TraceState) -> float:
    return float(
        np.mean([a.gate.gate_type is GateType.Reset for a in state.applied])
    )


def circuit_style(p_ctrl: float, trials: int) -> TraceState:
    state = TraceState(L, rng_registry=RNGStreamRegistry.create(SEEDS))
    state.track("reset_fraction", reset_fraction)
    execute(ct_circuit(p_ctrl), state, trial_count=trials)
    return state


def imperative_style(p_ctrl: float) -> TraceState:
    state = TraceState(L, rng_registry=RNGStreamRegistry.create(SEEDS))
    pointer = StaircaseRight(1)
    with StateScope(state) as scope:
        for _ in range(STEPS):
            scope.apply_with_prob(
                [
                    (p_ctrl, Gate(GateType.Reset), pointer),
                    (1 - p_ctrl, Gate(GateType.HaarRandom), pointer),
                ],
                stream="ctrl",
            )
        scope.record()
    return state


if __name__ == "__main__":
    setup_logging()

    preview = expand_circuit(ct_circuit(P_CTRL), registry=RNGStreamRegistry.create(SEEDS))
    for row in preview[:8]:
        for op in row:
            print(f"step {op.step:>3}: {op.gate.label:<4} on {op.sites}")

    from_circuit = circuit_style(P_CTRL, trials=1)
    from_scope = imperative_style(P_CTRL)
    print("Identical gate sequences:", from_circuit.applied == from_scope.applied)

    for p in np.linspace(0.1, 0.9, 5):
        state = circuit_style(float(p), trials=10)
        fractions = np.asarray(state.observables["reset_fraction"])
        print(f"p_ctrl={p:.1f}: reset fraction {fractions[-1]:.3f}")
