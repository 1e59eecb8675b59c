"""
Scoped, explicit binding of a state handle for imperative use.

A `StateScope` binds one handle for the duration of a ``with`` block and
exposes gate application, stochastic branching and recording on it. There
is no module-level "current state": the scope object is the only way to
reach the bound handle, and it is unbound on every exit path.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar, Union

from circuit_weave.circuit.branch import select_branch
from circuit_weave.circuit.circuit import (
    Outcome,
    OutcomeLike,
    check_binding,
    coerce_outcomes,
)
from circuit_weave.core.errors import InactiveScopeError, ValidationError
from circuit_weave.core.rng import RNGStreamRegistry, StreamKey
from circuit_weave.geometry.base import Geometry, Topology
from circuit_weave.geometry.resolver import resolve
from circuit_weave.operation.gate import Gate
from circuit_weave.state.interfaces import StateHandleLike

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateScope:
    """
    Context manager binding a state handle.

    Example:
        with StateScope(state) as scope:
            scope.apply(Gate(GateType.Reset), left)
            scope.apply_with_prob([(0.5, Gate(GateType.HaarRandom), right)])
            scope.record()

    `registry`, `size` and `topology` default to the handle's
    ``rng_registry``, ``size`` and ``topology`` attributes.
    """

    def __init__(
        self,
        state: StateHandleLike,
        *,
        registry: Optional[RNGStreamRegistry] = None,
        size: Optional[int] = None,
        topology: Union[str, Topology, None] = None,
    ) -> None:
        self._state = state
        self._registry = registry if registry is not None else getattr(
            state, "rng_registry", None
        )
        size = size if size is not None else getattr(state, "size", None)
        topology = topology if topology is not None else getattr(
            state, "topology", None
        )
        if size is None or topology is None:
            raise ValidationError(
                "StateScope needs a size and topology, either passed "
                "explicitly or as attributes of the state"
            )
        self._size = int(size)
        self._topology = Topology.parse(topology)
        self._active = False

    def __enter__(self) -> "StateScope":
        if self._active:
            raise ValidationError("StateScope is already bound")
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def state(self) -> StateHandleLike:
        if not self._active:
            raise InactiveScopeError("StateScope is not bound; use it in a with block")
        return self._state

    def apply(self, gate: Gate, geometry: Geometry, step_index: int = 1) -> None:
        """
        Resolves `geometry` and applies `gate` on every resulting group.
        Staircases advance once.
        """
        state = self.state
        check_binding(gate, geometry, self._size, self._topology)
        for sites in resolve(geometry, step_index, self._size, self._topology):
            state.apply_gate(gate, sites)

    def apply_with_prob(
        self,
        outcomes: Iterable[OutcomeLike],
        stream: StreamKey = "ctrl",
        step_index: int = 1,
    ) -> Optional[Outcome]:
        """
        Takes one draw from `stream` and applies the selected branch

        Returns
        -------
        Outcome | None
            The applied outcome, or None if the no-op branch was drawn
        """
        state = self.state
        if self._registry is None:
            raise ValidationError("StateScope has no RNG registry to draw from")
        resolved = coerce_outcomes(outcomes, self._size, self._topology)
        outcome = select_branch(resolved, self._registry.draw_uniform(stream))
        if outcome is None:
            logger.debug("apply_with_prob drew the no-op branch")
            return None
        for sites in resolve(
            outcome.geometry, step_index, self._size, self._topology
        ):
            state.apply_gate(outcome.gate, sites)
        return outcome

    def record(self) -> None:
        self.state.capture_observation()


def with_state(
    state: StateHandleLike, fn: Callable[[StateScope], T], **kwargs: Any
) -> T:
    """
    Runs `fn` with a scope bound to `state` and returns its result. The
    scope is unbound when `fn` returns or raises.
    """
    with StateScope(state, **kwargs) as scope:
        return fn(scope)
