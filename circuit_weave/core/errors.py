"""
Exception hierarchy shared by the circuit engine.

Every error derives from `CircuitWeaveError` and from the closest builtin, so
callers can catch either the library type or the builtin one.
"""

from __future__ import annotations


class CircuitWeaveError(Exception):
    """Base class for all circuit_weave errors."""


class ValidationError(CircuitWeaveError, ValueError):
    """
    Raised for construction errors (bad circuits, gates, geometries) and
    invocation errors (bad trial counts, unknown recording presets).
    """


class UnknownStreamError(CircuitWeaveError, KeyError):
    """Raised when a random stream name is not one of the recognised streams."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message instead
        return str(self.args[0]) if self.args else ""


class SiteRangeError(CircuitWeaveError, IndexError):
    """Raised when a geometry resolves to a site outside ``1..L``."""


class UnsupportedSiteShapeError(CircuitWeaveError, ValueError):
    """Raised by a state handle when a site-group does not fit the gate."""


class InactiveScopeError(CircuitWeaveError, RuntimeError):
    """Raised when a `StateScope` is used outside of its ``with`` block."""
