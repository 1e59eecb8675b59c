# flake8: noqa

from .base import Geometry, Topology  # noqa: F401
from .compound import AllSites, BrickParity, Bricklayer  # noqa: F401
from .resolver import check_sites, resolve  # noqa: F401
from .staircase import (  # noqa: F401
    Direction,
    Staircase,
    StaircaseLeft,
    StaircaseRight,
    advance,
)
from .static import AdjacentPair, SingleSite  # noqa: F401
