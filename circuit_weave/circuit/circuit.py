"""
Symbolic circuits.

A `Circuit` is an immutable, ordered list of operations replayed for
`steps` steps per trial. Operations are declared through a `CircuitBuilder`
in the order they should run; validation happens at declaration time so a
built circuit is always executable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple, Union

from circuit_weave.circuit_weave import Config
from circuit_weave.core.errors import ValidationError
from circuit_weave.core.rng import StreamKey
from circuit_weave.geometry.base import Geometry, Topology
from circuit_weave.geometry.staircase import Staircase
from circuit_weave.operation.gate import Gate


@dataclass(frozen=True)
class Outcome:
    """
    One branch of a stochastic operation.

    Attributes
    ----------
    probability : float
        Probability of this branch, in (0, 1].
    gate : Gate
        Gate applied when the branch is selected.
    geometry : Geometry
        Where the gate is applied.
    """

    probability: float
    gate: Gate
    geometry: Geometry


@dataclass(frozen=True)
class DeterministicOperation:
    gate: Gate
    geometry: Geometry

    @property
    def geometries(self) -> Tuple[Geometry, ...]:
        return (self.geometry,)


@dataclass(frozen=True)
class StochasticOperation:
    """
    Applies at most one of `outcomes`, chosen by a single draw from
    `stream`. The probability mass left over by the outcomes is an implicit
    no-op branch.
    """

    outcomes: Tuple[Outcome, ...]
    stream: StreamKey

    @property
    def geometries(self) -> Tuple[Geometry, ...]:
        return tuple(o.geometry for o in self.outcomes)

    @property
    def noop_probability(self) -> float:
        return max(0.0, 1.0 - math.fsum(o.probability for o in self.outcomes))


Operation = Union[DeterministicOperation, StochasticOperation]


@dataclass(frozen=True)
class Circuit:
    """
    Attributes
    ----------
    operations : tuple
        Operations in declaration order.
    steps : int
        Number of times the operation list is replayed per trial.
    size : int
        Number of sites L.
    topology : Topology
        Boundary condition.
    """

    operations: Tuple[Operation, ...]
    steps: int
    size: int
    topology: Topology

    @property
    def pointers(self) -> Tuple[Staircase, ...]:
        """
        Staircases owned by this circuit's operations, in declaration order
        """
        seen: List[Staircase] = []
        for op in self.operations:
            for geometry in op.geometries:
                if isinstance(geometry, Staircase) and geometry not in seen:
                    seen.append(geometry)
        return tuple(seen)

    def reset(self) -> None:
        """
        Rewinds every staircase to its start position
        """
        for pointer in self.pointers:
            pointer.reset()

    def __len__(self) -> int:
        return len(self.operations)


OutcomeLike = Union[Outcome, Tuple[float, Gate, Geometry]]


def check_binding(
    gate: Gate, geometry: Geometry, size: int, topology: Topology
) -> None:
    """
    Checks that `gate` can be applied on the groups `geometry` resolves to

    Raises
    ------
    ValidationError
        On a wrong type, a support/group size mismatch or a staircase
        starting outside its range
    """
    if not isinstance(gate, Gate):
        raise ValidationError(f"Expected a Gate, got {gate!r}")
    if not isinstance(geometry, Geometry):
        raise ValidationError(f"Expected a Geometry, got {geometry!r}")
    if gate.support != geometry.group_size:
        raise ValidationError(
            f"{gate!r} acts on {gate.support} site(s) but "
            f"{geometry!r} yields groups of {geometry.group_size}"
        )
    if isinstance(geometry, Staircase):
        geometry.validate_start(size, topology)


def coerce_outcomes(
    outcomes: Iterable[OutcomeLike], size: int, topology: Topology
) -> Tuple[Outcome, ...]:
    """
    Normalises and validates the branches of a stochastic operation

    Returns
    -------
    Tuple[Outcome, ...]

    Raises
    ------
    ValidationError
        If the outcome list is empty, a probability lies outside (0, 1]
        or the probabilities sum to more than one (plus tolerance)
    """
    resolved = []
    for outcome in outcomes:
        if not isinstance(outcome, Outcome):
            try:
                probability, gate, geometry = outcome
            except (TypeError, ValueError):
                raise ValidationError(
                    "Outcomes must be Outcome instances or "
                    f"(probability, gate, geometry) tuples, got {outcome!r}"
                ) from None
            outcome = Outcome(probability, gate, geometry)
        probability = outcome.probability
        if (
            isinstance(probability, bool)
            or not isinstance(probability, (int, float))
            or not 0.0 < probability <= 1.0
        ):
            raise ValidationError(
                f"Outcome probability must lie in (0, 1], got {probability!r}"
            )
        check_binding(outcome.gate, outcome.geometry, size, topology)
        resolved.append(Outcome(float(probability), outcome.gate, outcome.geometry))
    if not resolved:
        raise ValidationError("A stochastic operation needs at least one outcome")
    total = math.fsum(o.probability for o in resolved)
    if total > 1.0 + Config().probability_tolerance:
        raise ValidationError(
            f"Outcome probabilities sum to {total!r}, which exceeds 1"
        )
    return tuple(resolved)


class CircuitBuilder:
    """
    Declares the operations of a circuit in execution order.

    >>> builder = CircuitBuilder(size=4, topology="periodic", steps=10)
    >>> builder.apply(Gate(GateType.Reset), StaircaseRight(1))
    >>> builder.apply_with_prob(
    ...     [(0.5, Gate(GateType.HaarRandom), StaircaseLeft(4))], stream="ctrl"
    ... )
    >>> circuit = builder.build()
    """

    def __init__(
        self,
        size: int,
        topology: Union[str, Topology] = Topology.Periodic,
        steps: int = 1,
    ) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size < 2:
            raise ValidationError(f"size must be an integer >= 2, got {size!r}")
        if isinstance(steps, bool) or not isinstance(steps, int) or steps < 1:
            raise ValidationError(f"steps must be an integer >= 1, got {steps!r}")
        self.size = size
        self.topology = Topology.parse(topology)
        self.steps = steps
        self._operations: List[Operation] = []

    def _claim(self, operation: Operation) -> None:
        pointers = [g for g in operation.geometries if isinstance(g, Staircase)]
        for pointer in pointers:
            if pointer.owner is not None and pointer.owner is not operation:
                raise ValidationError(
                    f"{pointer!r} is already owned by another operation; "
                    "declare a separate staircase for each operation"
                )
        for pointer in pointers:
            pointer.claim(operation)

    def apply(self, gate: Gate, geometry: Geometry) -> "CircuitBuilder":
        """
        Declares a deterministic operation

        Parameters
        ----------
        gate: Gate
            Gate to apply every step
        geometry: Geometry
            Where to apply it

        Returns
        -------
        CircuitBuilder
            The builder, for chaining
        """
        check_binding(gate, geometry, self.size, self.topology)
        operation = DeterministicOperation(gate, geometry)
        self._claim(operation)
        self._operations.append(operation)
        return self

    def apply_with_prob(
        self, outcomes: Iterable[OutcomeLike], stream: StreamKey = "ctrl"
    ) -> "CircuitBuilder":
        """
        Declares a stochastic operation

        Parameters
        ----------
        outcomes: Iterable[Outcome | Tuple[float, Gate, Geometry]]
            Branches in the order they are tested
        stream: str | StreamName
            Random stream the branch draw is taken from

        Returns
        -------
        CircuitBuilder
            The builder, for chaining
        """
        resolved = coerce_outcomes(outcomes, self.size, self.topology)
        operation = StochasticOperation(resolved, stream)
        self._claim(operation)
        self._operations.append(operation)
        return self

    def build(self) -> Circuit:
        return Circuit(
            operations=tuple(self._operations),
            steps=self.steps,
            size=self.size,
            topology=self.topology,
        )


def build_circuit(
    fn: Callable[[CircuitBuilder], None],
    *,
    size: int,
    topology: Union[str, Topology] = Topology.Periodic,
    steps: int = 1,
) -> Circuit:
    """
    Runs `fn` on a fresh builder and returns the resulting circuit

    >>> def body(c):
    ...     c.apply(Gate(GateType.Reset), StaircaseRight(1))
    >>> circuit = build_circuit(body, size=4, steps=10)
    """
    builder = CircuitBuilder(size=size, topology=topology, steps=steps)
    fn(builder)
    return builder.build()
