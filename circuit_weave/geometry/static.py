"""
Geometries whose sites are known when the circuit is declared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from circuit_weave.geometry.base import Geometry, SiteGroup, Topology, neighbour


@dataclass(frozen=True)
class SingleSite(Geometry):
    """
    A single physical site, for one-site gates such as Pauli gates,
    projections or resets.
    """

    site: int

    group_size = 1

    def groups(self, size: int, topology: Topology) -> List[SiteGroup]:
        return [(self.site,)]


@dataclass(frozen=True)
class AdjacentPair(Geometry):
    """
    The pair ``(first, first + 1)``. On periodic chains ``first == L``
    gives ``(L, 1)``.
    """

    first: int

    group_size = 2

    def groups(self, size: int, topology: Topology) -> List[SiteGroup]:
        return [(self.first, neighbour(self.first, size, topology))]
