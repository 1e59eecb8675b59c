"""
Lightweight protocol-style interfaces for the state collaborator.

The engine never touches tensors; it only needs a handle that applies a
gate to a site group and captures the currently tracked observables. Any
object with these methods can be executed on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Tuple

if TYPE_CHECKING:
    from circuit_weave.operation.gate import Gate


class StateHandleLike(Protocol):
    def apply_gate(self, gate: "Gate", sites: Tuple[int, ...]) -> None: ...
    def capture_observation(self) -> None: ...
