from __future__ import annotations

from typing import Dict, List, Optional, Union

from circuit_weave.core.errors import SiteRangeError
from circuit_weave.geometry.base import Geometry, SiteGroup, Topology
from circuit_weave.geometry.staircase import Staircase, advance

PointerPositions = Dict[Staircase, int]


def check_sites(groups: List[SiteGroup], size: int) -> List[SiteGroup]:
    for group in groups:
        for site in group:
            if not 1 <= site <= size:
                raise SiteRangeError(
                    f"Site {site} in group {group} is outside 1..{size}"
                )
    return groups


def resolve(
    geometry: Geometry,
    step_index: int,
    size: int,
    topology: Union[str, Topology],
    positions: Optional[PointerPositions] = None,
) -> List[SiteGroup]:
    """
    Maps a geometry to concrete site groups

    Static and compound geometries ignore `step_index`. A staircase
    resolves to its current pair and then advances exactly once. Only call
    this once an operation is known to execute: a skipped call must not
    move the pointer.

    Parameters
    ----------
    geometry: Geometry
        Geometry to resolve
    step_index: int
        1-based step within the trial
    size: int
        Number of sites L
    topology: str | Topology
        Boundary condition
    positions: Dict[Staircase, int] | None
        When given, staircase positions are read from and written to this
        table (falling back to the staircase's own position) and the
        staircase itself is left untouched. Used when previewing.

    Returns
    -------
    List[Tuple[int, ...]]
        Site groups in application order

    Raises
    ------
    SiteRangeError
        If a resolved site lies outside ``1..L``
    """
    topology = Topology.parse(topology)
    if isinstance(geometry, Staircase):
        if positions is None:
            groups = geometry.groups(size, topology)
            check_sites(groups, size)
            geometry.step(size, topology)
            return groups
        position = positions.get(geometry, geometry.position)
        groups = [geometry.pair(position, size, topology)]
        check_sites(groups, size)
        positions[geometry] = advance(geometry.direction, position, size, topology)
        return groups
    return check_sites(geometry.groups(size, topology), size)
