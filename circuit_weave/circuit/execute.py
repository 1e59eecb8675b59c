"""
Circuit execution engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from circuit_weave.circuit.circuit import Circuit
from circuit_weave.circuit.recording import (
    PolicyLike,
    RecordingContext,
    resolve_policy,
    should_record,
)
from circuit_weave.circuit.walk import check_trial_count, walk
from circuit_weave.circuit_weave import Config
from circuit_weave.core.errors import ValidationError
from circuit_weave.core.rng import RNGStreamRegistry

if TYPE_CHECKING:
    from circuit_weave.state.interfaces import StateHandleLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionReport:
    """
    Attributes
    ----------
    trial_count : int
        Trials run.
    executed : int
        Operations that applied a gate (the final cumulative count).
    skipped : int
        Stochastic operations that took the no-op branch.
    captures : int
        Calls made to ``state.capture_observation``.
    """

    trial_count: int
    executed: int
    skipped: int
    captures: int


def execute(
    circuit: Circuit,
    state: StateHandleLike,
    trial_count: int = 1,
    policy: Optional[PolicyLike] = None,
    *,
    registry: Optional[RNGStreamRegistry] = None,
) -> ExecutionReport:
    """
    Replays `circuit` on `state` for `trial_count` trials

    Every trial runs all steps of the circuit, and every step runs the
    operations in declaration order. Deterministic operations always apply
    their gate, once per resolved site group. Stochastic operations take one
    draw from their stream and apply the selected branch, if any. After
    each executed operation the recording policy is consulted and, when it
    fires, ``state.capture_observation()`` is called immediately.

    Random streams and staircase positions carry over between trials and
    between calls.

    Parameters
    ----------
    circuit: Circuit
        Circuit to run
    state: StateHandleLike
        Handle receiving ``apply_gate`` and ``capture_observation`` calls
    trial_count: int
        Number of trials, at least 1
    policy: str | RecordingPolicy | Callable[[RecordingContext], bool] | None
        When to capture observations; defaults to ``Config().default_policy``
    registry: RNGStreamRegistry | None
        Random streams; defaults to ``state.rng_registry``

    Returns
    -------
    ExecutionReport

    Raises
    ------
    ValidationError
        For an invalid trial count, an unknown policy or a missing registry,
        before the state is touched
    UnknownStreamError
        When a stochastic operation names an unknown stream
    SiteRangeError, UnsupportedSiteShapeError
        Propagated from geometry resolution and the state handle
    """
    check_trial_count(trial_count)
    resolved_policy = resolve_policy(
        Config().default_policy if policy is None else policy
    )
    if registry is None:
        registry = getattr(state, "rng_registry", None)
        if registry is None:
            raise ValidationError(
                "No RNG registry given and the state has no rng_registry"
            )

    logger.info(
        "Executing circuit (L=%s, %s, %s steps x %s operations) for %s trial(s)",
        circuit.size,
        circuit.topology.value,
        circuit.steps,
        len(circuit.operations),
        trial_count,
    )
    executed = skipped = captures = 0
    for visit in walk(circuit, registry, trial_count):
        if not visit.executed:
            skipped += 1
            logger.debug(
                "Trial %s step %s operation %s: no-op branch",
                visit.trial,
                visit.step,
                visit.operation_index,
            )
            continue
        for sites in visit.groups:
            state.apply_gate(visit.gate, sites)
        executed += 1
        context = RecordingContext(
            trial_index=visit.trial,
            cumulative_count=executed,
            gate=visit.gate,
            boundary_flag=visit.boundary,
        )
        if should_record(resolved_policy, context, trial_count):
            state.capture_observation()
            captures += 1
            logger.debug(
                "Captured observation after operation %s (trial %s)",
                executed,
                visit.trial,
            )

    logger.info(
        "Finished: %s executed, %s no-op, %s capture(s)", executed, skipped, captures
    )
    return ExecutionReport(trial_count, executed, skipped, captures)
