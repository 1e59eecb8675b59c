# flake8: noqa

from .branch import draw_branch, select_branch  # noqa: F401
from .circuit import (  # noqa: F401
    Circuit,
    CircuitBuilder,
    DeterministicOperation,
    Outcome,
    StochasticOperation,
    build_circuit,
)
from .execute import ExecutionReport, execute  # noqa: F401
from .expand import ExpandedOp, expand_circuit  # noqa: F401
from .recording import (  # noqa: F401
    ExecutionContext,
    RecordingContext,
    RecordingPolicy,
    every_n_operations,
    every_n_trials,
    resolve_policy,
    should_record,
)
