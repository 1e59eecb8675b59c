"""Top-level CircuitWeave helpers."""

# Keep JAX RNG behavior stable across versions by pinning the threefry PRNG
# implementation. This needs to run before any registry creates keys.

import jax

from circuit_weave import circuit, core, geometry, operation, state
from circuit_weave.circuit import (
    Circuit,
    CircuitBuilder,
    ExecutionReport,
    ExpandedOp,
    Outcome,
    RecordingContext,
    RecordingPolicy,
    build_circuit,
    every_n_operations,
    every_n_trials,
    execute,
    expand_circuit,
)
from circuit_weave.circuit_weave import Config, Session
from circuit_weave.core import (
    CircuitWeaveError,
    InactiveScopeError,
    RNGStreamRegistry,
    SiteRangeError,
    StreamName,
    UnknownStreamError,
    UnsupportedSiteShapeError,
    ValidationError,
)
from circuit_weave.geometry import (
    AdjacentPair,
    AllSites,
    Bricklayer,
    SingleSite,
    StaircaseLeft,
    StaircaseRight,
    Topology,
)
from circuit_weave.operation import Gate, GateType
from circuit_weave.state import StateScope, TraceState, with_state

jax.config.update("jax_default_prng_impl", "threefry2x32")


__all__ = [
    "circuit",
    "core",
    "geometry",
    "operation",
    "state",
    "Circuit",
    "CircuitBuilder",
    "ExecutionReport",
    "ExpandedOp",
    "Outcome",
    "RecordingContext",
    "RecordingPolicy",
    "build_circuit",
    "every_n_operations",
    "every_n_trials",
    "execute",
    "expand_circuit",
    "Config",
    "Session",
    "CircuitWeaveError",
    "InactiveScopeError",
    "RNGStreamRegistry",
    "SiteRangeError",
    "StreamName",
    "UnknownStreamError",
    "UnsupportedSiteShapeError",
    "ValidationError",
    "AdjacentPair",
    "AllSites",
    "Bricklayer",
    "SingleSite",
    "StaircaseLeft",
    "StaircaseRight",
    "Topology",
    "Gate",
    "GateType",
    "StateScope",
    "TraceState",
    "with_state",
]
