"""
In-memory state handle that records what the engine asks of it.

`TraceState` performs no linear algebra. It keeps the ordered list of gate
applications, counts observation captures and evaluates user-registered
observables on every capture, which makes it suitable for dry runs and for
checking reproducibility of a circuit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from uuid import UUID, uuid4

from circuit_weave.core.errors import UnsupportedSiteShapeError
from circuit_weave.core.rng import RNGStreamRegistry
from circuit_weave.geometry.base import Topology
from circuit_weave.geometry.resolver import check_sites
from circuit_weave.operation.gate import Gate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedGate:
    gate: Gate
    sites: Tuple[int, ...]


class TraceState:
    """
    Parameters
    ----------
    size: int
        Number of sites L
    topology: str | Topology
        Boundary condition
    rng_registry: RNGStreamRegistry | None
        Streams used by `execute` when no registry is passed explicitly

    Examples
    --------
    >>> state = TraceState(4, rng_registry=registry)
    >>> state.track("gates", lambda s: len(s.applied))
    >>> execute(circuit, state, trial_count=3)
    >>> state.observables["gates"]
    """

    __slots__ = (
        "_uid",
        "size",
        "topology",
        "rng_registry",
        "applied",
        "captures",
        "observables",
        "_tracked",
    )

    def __init__(
        self,
        size: int,
        topology: Union[str, Topology] = Topology.Periodic,
        rng_registry: Optional[RNGStreamRegistry] = None,
    ) -> None:
        self._uid: UUID = uuid4()
        self.size = size
        self.topology = Topology.parse(topology)
        self.rng_registry = rng_registry
        self.applied: List[AppliedGate] = []
        self.captures = 0
        self.observables: Dict[str, List[Any]] = {}
        self._tracked: Dict[str, Callable[["TraceState"], Any]] = {}
        logger.debug("Creating trace state with uid %s", self._uid)

    def __repr__(self) -> str:
        return (
            f"TraceState(L={self.size}, {self.topology.value}, "
            f"{len(self.applied)} gates, {self.captures} captures)"
        )

    @property
    def uid(self) -> UUID:
        return self._uid

    def apply_gate(self, gate: Gate, sites: Tuple[int, ...]) -> None:
        """
        Records the application of `gate` on `sites`

        Raises
        ------
        UnsupportedSiteShapeError
            If the number of sites differs from the gate's support
        SiteRangeError
            If a site lies outside ``1..L``
        """
        sites = tuple(sites)
        if len(sites) != gate.support:
            raise UnsupportedSiteShapeError(
                f"{gate!r} acts on {gate.support} site(s), got {sites}"
            )
        check_sites([sites], self.size)
        self.applied.append(AppliedGate(gate, sites))

    def track(self, name: str, fn: Callable[["TraceState"], Any]) -> "TraceState":
        """
        Registers an observable evaluated on every capture

        Parameters
        ----------
        name: str
            Key under which values are stored in `observables`
        fn: Callable[[TraceState], Any]
            Called with this state on each capture
        """
        self._tracked[name] = fn
        self.observables.setdefault(name, [])
        return self

    def capture_observation(self) -> None:
        self.captures += 1
        for name, fn in self._tracked.items():
            self.observables[name].append(fn(self))
