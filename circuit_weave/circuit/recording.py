"""
Recording policies decide, after each executed operation, whether the
state should capture its tracked observables.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from circuit_weave.core.errors import ValidationError
from circuit_weave.operation.gate import Gate


@dataclass(frozen=True)
class RecordingContext:
    """
    Snapshot handed to recording predicates after each executed operation.

    Attributes
    ----------
    trial_index : int
        1-based index of the running trial.
    cumulative_count : int
        Executed operations so far, across all trials. No-op branches do not
        count.
    gate : Gate
        Gate that was just applied.
    boundary_flag : bool
        True exactly when the operation was the last operation of the last
        step of the trial, i.e. a trial boundary.
    """

    trial_index: int
    cumulative_count: int
    gate: Gate
    boundary_flag: bool


ExecutionContext = RecordingContext

Predicate = Callable[[RecordingContext], bool]


class RecordingPolicy(Enum):
    EveryTrial = "every-trial"
    EveryOperation = "every-operation"
    FinalTrialOnly = "final-trial-only"


PolicyLike = Union[str, RecordingPolicy, Predicate]


def resolve_policy(policy: PolicyLike) -> Union[RecordingPolicy, Predicate]:
    """
    Normalises a preset name, preset member or predicate

    Raises
    ------
    ValidationError
        If `policy` is neither a known preset nor callable
    """
    if isinstance(policy, RecordingPolicy):
        return policy
    if isinstance(policy, str):
        try:
            return RecordingPolicy(policy)
        except ValueError:
            valid = ", ".join(p.value for p in RecordingPolicy)
            raise ValidationError(
                f"Unknown recording policy: {policy!r}. Valid presets: {valid}"
            ) from None
    if callable(policy):
        return policy
    raise ValidationError(
        f"Recording policy must be a preset name or a callable, got {policy!r}"
    )


def should_record(
    policy: Union[RecordingPolicy, Predicate],
    context: RecordingContext,
    trial_count: int,
) -> bool:
    match policy:
        case RecordingPolicy.EveryOperation:
            return True
        case RecordingPolicy.EveryTrial:
            return context.boundary_flag
        case RecordingPolicy.FinalTrialOnly:
            return context.boundary_flag and context.trial_index == trial_count
    return bool(policy(context))


def _check_period(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ValidationError(f"Recording period must be an integer >= 1, got {n!r}")


def every_n_operations(n: int) -> Predicate:
    """
    Records after every `n`-th executed operation

    >>> execute(circuit, state, trial_count=5, policy=every_n_operations(10))
    """
    _check_period(n)

    def predicate(context: RecordingContext) -> bool:
        return context.cumulative_count % n == 0

    return predicate


def every_n_trials(n: int) -> Predicate:
    """
    Records at the end of every `n`-th trial
    """
    _check_period(n)

    def predicate(context: RecordingContext) -> bool:
        return context.trial_index % n == 0 and context.boundary_flag

    return predicate
