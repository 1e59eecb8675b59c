from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Tuple, Union

from circuit_weave.core.errors import ValidationError

SiteGroup = Tuple[int, ...]


class Topology(Enum):
    """
    Boundary condition of the chain of sites
    """

    Open = "open"
    Periodic = "periodic"

    @classmethod
    def parse(cls, topology: Union[str, "Topology"]) -> "Topology":
        if isinstance(topology, Topology):
            return topology
        try:
            return cls(topology)
        except ValueError:
            raise ValidationError(
                f"Topology must be 'open' or 'periodic', got {topology!r}"
            ) from None


class Geometry(ABC):
    """
    Rule selecting the target sites of an operation.

    Sites are 1-based. `group_size` is the number of sites in every group
    the geometry resolves to, which must match the support of the gate
    bound to it.
    """

    group_size: int = 1
    compound: bool = False

    @abstractmethod
    def groups(self, size: int, topology: Topology) -> List[SiteGroup]:
        """
        Returns the site groups for a chain of `size` sites
        """


def neighbour(site: int, size: int, topology: Topology) -> int:
    """
    Right neighbour of `site`, wrapping ``L -> 1`` on periodic chains. On
    open chains the neighbour of ``L`` is ``L + 1``, which the resolver
    rejects as out of range.
    """
    if site == size and topology is Topology.Periodic:
        return 1
    return site + 1
