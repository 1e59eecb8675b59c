"""
The single traversal shared by execution and preview.

Both `execute` and `expand_circuit` consume this generator, so they take
the same draws, in the same order, from the same streams, and resolve the
same geometries. Only what they do with each resolved operation differs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from circuit_weave.circuit.branch import draw_branch
from circuit_weave.circuit.circuit import Circuit, DeterministicOperation
from circuit_weave.core.errors import ValidationError
from circuit_weave.core.rng import RNGStreamRegistry
from circuit_weave.geometry.base import SiteGroup
from circuit_weave.geometry.resolver import PointerPositions, resolve
from circuit_weave.operation.gate import Gate


@dataclass(frozen=True)
class ResolvedOperation:
    """
    One visited operation. `gate` is None when a stochastic operation took
    its no-op branch, in which case `groups` is empty.
    """

    trial: int
    step: int
    operation_index: int
    gate: Optional[Gate]
    groups: Tuple[SiteGroup, ...]
    boundary: bool

    @property
    def executed(self) -> bool:
        return self.gate is not None


def check_trial_count(trial_count: int) -> None:
    if (
        isinstance(trial_count, bool)
        or not isinstance(trial_count, int)
        or trial_count < 1
    ):
        raise ValidationError(
            f"trial_count must be an integer >= 1, got {trial_count!r}"
        )


def walk(
    circuit: Circuit,
    registry: RNGStreamRegistry,
    trial_count: int,
    positions: Optional[PointerPositions] = None,
) -> Iterator[ResolvedOperation]:
    """
    Yields every operation visit in execution order

    Geometries are resolved lazily, when the visit is yielded, and only
    for operations that execute. With `positions` given, staircases are
    advanced in that table instead of in place.
    """
    last_index = len(circuit.operations) - 1
    for trial in range(1, trial_count + 1):
        for step in range(1, circuit.steps + 1):
            for index, operation in enumerate(circuit.operations):
                boundary = step == circuit.steps and index == last_index
                if isinstance(operation, DeterministicOperation):
                    gate, geometry = operation.gate, operation.geometry
                else:
                    outcome = draw_branch(operation, registry)
                    if outcome is None:
                        yield ResolvedOperation(trial, step, index, None, (), boundary)
                        continue
                    gate, geometry = outcome.gate, outcome.geometry
                groups = resolve(
                    geometry, step, circuit.size, circuit.topology, positions
                )
                yield ResolvedOperation(
                    trial, step, index, gate, tuple(groups), boundary
                )
