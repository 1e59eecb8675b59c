"""
Engine-wide primitives: named random streams and the error taxonomy.

Nothing here depends on circuits, geometries or states.
"""

from circuit_weave.core import errors, rng
from circuit_weave.core.errors import (
    CircuitWeaveError,
    InactiveScopeError,
    SiteRangeError,
    UnknownStreamError,
    UnsupportedSiteShapeError,
    ValidationError,
)
from circuit_weave.core.rng import RNGStreamRegistry, StreamName

__all__ = [
    "errors",
    "rng",
    "CircuitWeaveError",
    "InactiveScopeError",
    "SiteRangeError",
    "UnknownStreamError",
    "UnsupportedSiteShapeError",
    "ValidationError",
    "RNGStreamRegistry",
    "StreamName",
]
