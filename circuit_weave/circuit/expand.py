"""
Preview of the concrete gate applications a circuit would perform.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from circuit_weave.circuit.circuit import Circuit
from circuit_weave.circuit.walk import check_trial_count, walk
from circuit_weave.circuit_weave import Config
from circuit_weave.core.rng import REQUIRED_STREAMS, RNGStreamRegistry
from circuit_weave.geometry.staircase import Staircase
from circuit_weave.operation.gate import Gate


@dataclass(frozen=True)
class ExpandedOp:
    """
    One concrete gate application.

    Attributes
    ----------
    trial : int
        1-based trial index.
    step : int
        1-based step within the trial.
    operation_index : int
        0-based index of the declaring operation.
    gate : Gate
        Gate applied.
    sites : tuple[int, ...]
        Site group the gate acts on.
    """

    trial: int
    step: int
    operation_index: int
    gate: Gate
    sites: Tuple[int, ...]


def expand_circuit(
    circuit: Circuit,
    *,
    registry: Optional[RNGStreamRegistry] = None,
    seed: Optional[int] = None,
    trial_count: int = 1,
) -> List[List[ExpandedOp]]:
    """
    Enumerates the gate applications `execute` would perform, without
    touching any state

    Draws are taken exactly as during execution, from a snapshot of
    `registry`, so the caller's streams do not move. Staircases are advanced
    in a private table starting from their current positions, so the
    circuit is left untouched too. Previewing and then executing with the
    same registry yields the same gate sequence.

    Parameters
    ----------
    circuit: Circuit
        Circuit to expand
    registry: RNGStreamRegistry | None
        Streams to preview with; takes precedence over `seed`
    seed: int | None
        Seed for all required streams when no registry is given; defaults
        to ``Config().random_seed``
    trial_count: int
        Number of trials to expand

    Returns
    -------
    List[List[ExpandedOp]]
        One list per (trial, step), trial-major. Steps in which every
        operation took its no-op branch give an empty list.
    """
    check_trial_count(trial_count)
    if registry is None:
        if seed is None:
            seed = Config().random_seed
        registry = RNGStreamRegistry.create({s: seed for s in REQUIRED_STREAMS})
    else:
        registry = registry.snapshot()

    positions: Dict[Staircase, int] = {}
    expanded: List[List[ExpandedOp]] = [
        [] for _ in range(trial_count * circuit.steps)
    ]
    for visit in walk(circuit, registry, trial_count, positions):
        if not visit.executed:
            continue
        row = expanded[(visit.trial - 1) * circuit.steps + visit.step - 1]
        for sites in visit.groups:
            row.append(
                ExpandedOp(
                    visit.trial, visit.step, visit.operation_index, visit.gate, sites
                )
            )
    return expanded
