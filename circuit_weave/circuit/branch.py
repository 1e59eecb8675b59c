"""
Branch selection for stochastic operations.
"""

from __future__ import annotations

from typing import Optional, Sequence

from circuit_weave.circuit.circuit import Outcome, StochasticOperation
from circuit_weave.core.rng import RNGStreamRegistry


def select_branch(outcomes: Sequence[Outcome], r: float) -> Optional[Outcome]:
    """
    Selects the outcome whose cumulative interval contains `r`

    Outcomes partition [0, 1) into left-closed, right-open intervals in
    declaration order; a draw equal to an interval's upper edge falls into
    the next one.

    Parameters
    ----------
    outcomes: Sequence[Outcome]
        Branches in declaration order
    r: float
        Uniform draw in [0, 1)

    Returns
    -------
    Outcome | None
        The selected outcome, or None for the implicit no-op branch
        (``r >= sum(probabilities)``)
    """
    cumulative = 0.0
    for outcome in outcomes:
        cumulative += outcome.probability
        if r < cumulative:
            return outcome
    return None


def draw_branch(
    operation: StochasticOperation, registry: RNGStreamRegistry
) -> Optional[Outcome]:
    """
    Takes exactly one draw from the operation's stream and selects a branch
    """
    r = registry.draw_uniform(operation.stream)
    return select_branch(operation.outcomes, r)
