"""
Compound geometries expand into several site groups per resolution. The
gate bound to them is applied once per group, in the returned order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from circuit_weave.core.errors import ValidationError
from circuit_weave.geometry.base import Geometry, SiteGroup, Topology


class BrickParity(Enum):
    r"""
    Brick-layer sublayers

    Nearest neighbour
    -----------------
    Odd: (1,2), (3,4), (5,6), ...
    Even: (2,3), (4,5), ... plus (L,1) on periodic chains

    Next-nearest neighbour
    ----------------------
    Four stride-4 sublayers which together cover every (i, i+2) pair of a
    periodic chain whose length is a multiple of four.

    NnnOdd1: (1,3), (5,7), (9,11), ...
    NnnOdd2: (3,5), (7,9), ... plus (L-1,1) on periodic chains
    NnnEven1: (2,4), (6,8), (10,12), ...
    NnnEven2: (4,6), (8,10), ... plus (L,2) on periodic chains
    """

    Odd = "odd"
    Even = "even"
    NnnOdd1 = "nnn_odd_1"
    NnnOdd2 = "nnn_odd_2"
    NnnEven1 = "nnn_even_1"
    NnnEven2 = "nnn_even_2"


@dataclass(frozen=True)
class Bricklayer(Geometry):
    parity: BrickParity

    group_size = 2
    compound = True

    def __init__(self, parity: Union[str, BrickParity]) -> None:
        if not isinstance(parity, BrickParity):
            try:
                parity = BrickParity(parity)
            except ValueError:
                valid = ", ".join(p.value for p in BrickParity)
                raise ValidationError(
                    f"Bricklayer parity must be one of {valid}, got {parity!r}"
                ) from None
        object.__setattr__(self, "parity", parity)

    def groups(self, size: int, topology: Topology) -> List[SiteGroup]:
        periodic = topology is Topology.Periodic
        match self.parity:
            case BrickParity.Odd:
                pairs = [(i, i + 1) for i in range(1, size, 2)]
            case BrickParity.Even:
                pairs = [(i, i + 1) for i in range(2, size, 2)]
                if periodic:
                    pairs.append((size, 1))
            case BrickParity.NnnOdd1:
                pairs = [(i, i + 2) for i in range(1, size - 1, 4)]
            case BrickParity.NnnOdd2:
                pairs = [(i, i + 2) for i in range(3, size - 1, 4)]
                if periodic and size >= 4:
                    pairs.append((size - 1, 1))
            case BrickParity.NnnEven1:
                pairs = [(i, i + 2) for i in range(2, size - 1, 4)]
            case BrickParity.NnnEven2:
                pairs = [(i, i + 2) for i in range(4, size - 1, 4)]
                if periodic and size >= 4:
                    pairs.append((size, 2))
        return pairs


@dataclass(frozen=True)
class AllSites(Geometry):
    """
    Every site of the chain, one group per site: (1,), (2,), ..., (L,)
    """

    group_size = 1
    compound = True

    def groups(self, size: int, topology: Topology) -> List[SiteGroup]:
        return [(site,) for site in range(1, size + 1)]
