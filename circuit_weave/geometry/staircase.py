"""
Staircase geometries: pointers that act on ``(pos, pos + 1)`` and then move
one site in their direction.

The position arithmetic lives in the pure function `advance`; the staircase
object owns the current position and is the only thing that mutates it.
A staircase belongs to exactly one declared operation, which the circuit
builder enforces through `claim`.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from typing import Any, List, Optional

from circuit_weave.core.errors import ValidationError
from circuit_weave.geometry.base import Geometry, SiteGroup, Topology, neighbour


class Direction(Enum):
    Left = "left"
    Right = "right"


def max_position(size: int, topology: Topology) -> int:
    return size if topology is Topology.Periodic else size - 1


def advance(direction: Direction, position: int, size: int, topology: Topology) -> int:
    """
    Returns the position following `position`

    Parameters
    ----------
    direction: Direction
        Direction the pointer moves in
    position: int
        Current position (1-based)
    size: int
        Number of sites L
    topology: Topology
        Periodic pointers cycle through 1..L, open pointers through 1..L-1
        since the pair (L, L+1) does not exist. An open right pointer at or
        past L-1 moves to 1

    Returns
    -------
    int
        The next position
    """
    last = max_position(size, topology)
    if direction is Direction.Right:
        return 1 if position >= last else position + 1
    return last if position == 1 else position - 1


class Staircase(Geometry):
    __slots__ = ("_start", "_position", "_owner")

    group_size = 2

    def __init__(self, start: int) -> None:
        self._start = int(start)
        self._position = int(start)
        self._owner: Optional[Any] = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(start={self._start}, "
            f"position={self._position})"
        )

    @property
    @abstractmethod
    def direction(self) -> Direction:
        """
        Direction the pointer moves in
        """

    def max_start(self, size: int, topology: Topology) -> int:
        return max_position(size, topology)

    @property
    def start(self) -> int:
        return self._start

    @property
    def position(self) -> int:
        """
        Current position of the pointer (read only)
        """
        return self._position

    @property
    def owner(self) -> Optional[Any]:
        return self._owner

    def claim(self, owner: Any) -> None:
        """
        Marks `owner` as the operation declaring this staircase

        Raises
        ------
        ValidationError
            If another operation already owns the staircase
        """
        if self._owner is not None and self._owner is not owner:
            raise ValidationError(
                f"{self!r} is already owned by another operation; "
                "declare a separate staircase for each operation"
            )
        self._owner = owner

    def validate_start(self, size: int, topology: Topology) -> None:
        last = self.max_start(size, topology)
        if not 1 <= self._start <= last:
            raise ValidationError(
                f"{self.__class__.__name__} start must lie in 1..{last} for "
                f"L={size} ({topology.value}), got {self._start}"
            )

    def pair(self, position: int, size: int, topology: Topology) -> SiteGroup:
        if topology is Topology.Open:
            # (L-1, L) is the last pair of an open chain
            position = min(position, size - 1)
        return (position, neighbour(position, size, topology))

    def groups(self, size: int, topology: Topology) -> List[SiteGroup]:
        """
        Pair at the current position. Does not move the pointer.
        """
        return [self.pair(self._position, size, topology)]

    def step(self, size: int, topology: Topology) -> int:
        """
        Moves the pointer one site and returns the new position
        """
        self._position = advance(self.direction, self._position, size, topology)
        return self._position

    def reset(self) -> None:
        self._position = self._start


class StaircaseRight(Staircase):
    """
    Staircase moving right: ``pos += 1``, wrapping ``L -> 1`` on periodic
    chains and ``L-1 -> 1`` on open chains. On open chains it may start at
    ``L``, where it acts on ``(L-1, L)`` and then moves to 1.
    """

    __slots__ = ()
    direction = Direction.Right

    def max_start(self, size: int, topology: Topology) -> int:
        return size


class StaircaseLeft(Staircase):
    """
    Staircase moving left: ``pos -= 1``, wrapping ``1 -> L`` on periodic
    chains and ``1 -> L-1`` on open chains. The pair is still
    ``(pos, pos + 1)``.
    """

    __slots__ = ()
    direction = Direction.Left
