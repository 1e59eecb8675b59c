"""
Named random streams with explicit key threading.

Each stream owns a `jax.random` key chain. A draw splits the current key with
`borrow_key`, consumes the first half and keeps the second half as the new
cursor, so streams never interfere with one another and a stream's sequence
depends only on its seed and the number of draws taken from it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

import jax
import jax.numpy as jnp

from circuit_weave.core.errors import UnknownStreamError, ValidationError

logger = logging.getLogger(__name__)


def borrow_key(
    key: Optional[jnp.ndarray],
) -> Tuple[jnp.ndarray, Optional[jnp.ndarray]]:
    """
    Return a split key pair. Requires an explicit key.

    Parameters
    ----------
    key : jnp.ndarray
        PRNG key to split.

    Returns
    -------
    Tuple[jnp.ndarray, Optional[jnp.ndarray]]
        (use_key, next_key) where use_key is suitable for a single draw and
        next_key is the remainder of the split.

    Raises
    ------
    ValueError
        If `key` is None.
    """
    if key is None:
        raise ValueError("PRNG key is required; got None")
    use_key, next_key = jax.random.split(key)
    return use_key, next_key


class StreamName(Enum):
    """
    Recognised random streams

    Control: whether a control operation fires
    Projection: whether a projective measurement fires
    Unitary: sampling of random unitaries
    Measurement: Born-rule measurement outcomes
    StateInit: random initial states
    """

    Control = "ctrl"
    Projection = "proj"
    Unitary = "haar"
    Measurement = "born"
    StateInit = "state_init"

    @classmethod
    def parse(cls, name: Union[str, "StreamName"]) -> "StreamName":
        if isinstance(name, StreamName):
            return name
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise UnknownStreamError(
                f"Unknown RNG stream: {name!r}. Valid streams: {valid}"
            ) from None


REQUIRED_STREAMS = (
    StreamName.Control,
    StreamName.Projection,
    StreamName.Unitary,
    StreamName.Measurement,
)

StreamKey = Union[str, StreamName]


class _Stream:
    """A single key chain. Aliased stream names share one instance."""

    __slots__ = ("seed", "_key", "draws")

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._key = jax.random.PRNGKey(self.seed)
        self.draws = 0

    def _next_key(self) -> jnp.ndarray:
        use_key, self._key = borrow_key(self._key)
        self.draws += 1
        return use_key

    def uniform(self) -> float:
        return float(jax.random.uniform(self._next_key()))

    def normal(self, shape: Tuple[int, ...]) -> jnp.ndarray:
        return jax.random.normal(self._next_key(), shape)

    def copy(self) -> "_Stream":
        clone = _Stream.__new__(_Stream)
        clone.seed = self.seed
        clone._key = self._key
        clone.draws = self.draws
        return clone


class RNGStreamRegistry:
    """
    Mapping from stream name to an independent pseudo-random source.

    Use `RNGStreamRegistry.create` for the default mode, where every stream
    is seeded independently, or `RNGStreamRegistry.compat` for the legacy
    ordering in which the control, projection and unitary streams share one
    source.

    Examples
    --------
    >>> registry = RNGStreamRegistry.create(ctrl=42, proj=43, haar=44, born=45)
    >>> r = registry.draw_uniform("ctrl")
    """

    __slots__ = ("_streams", "_compat")

    def __init__(
        self, streams: Dict[StreamName, _Stream], compat: bool = False
    ) -> None:
        self._streams = streams
        self._compat = compat

    @classmethod
    def create(
        cls,
        seeds: Optional[Mapping[StreamKey, int]] = None,
        **kwargs: int,
    ) -> "RNGStreamRegistry":
        """
        Build a registry with one independent stream per name

        Parameters
        ----------
        seeds: Mapping[str | StreamName, int] | None
            Seeds keyed by stream name
        **kwargs: int
            Seeds given as keyword arguments, merged over `seeds`

        Returns
        -------
        RNGStreamRegistry

        Raises
        ------
        UnknownStreamError
            If a seed is given for a stream that does not exist
        ValidationError
            If one of ``ctrl``, ``proj``, ``haar``, ``born`` has no seed
        """
        merged: Dict[StreamName, int] = {}
        for name, seed in {**dict(seeds or {}), **kwargs}.items():
            merged[StreamName.parse(name)] = seed
        missing = [s.value for s in REQUIRED_STREAMS if s not in merged]
        if missing:
            raise ValidationError(
                f"Missing seeds for required streams: {', '.join(missing)}"
            )
        merged.setdefault(StreamName.StateInit, 0)
        streams = {name: _Stream(seed) for name, seed in merged.items()}
        logger.debug(
            "Created RNG registry with seeds %s",
            {name.value: s.seed for name, s in streams.items()},
        )
        return cls(streams)

    @classmethod
    def compat(cls, *, circuit: int, measurement: int) -> "RNGStreamRegistry":
        """
        Build a registry reproducing the legacy interleaved ordering

        The control, projection and unitary streams alias one source seeded
        with `circuit`, so their draws are interleaved in execution order.

        Parameters
        ----------
        circuit: int
            Seed of the shared circuit source
        measurement: int
            Seed of the measurement outcome stream
        """
        shared = _Stream(circuit)
        streams = {
            StreamName.Control: shared,
            StreamName.Projection: shared,
            StreamName.Unitary: shared,
            StreamName.Measurement: _Stream(measurement),
            StreamName.StateInit: _Stream(0),
        }
        logger.debug(
            "Created compat RNG registry (circuit=%s, measurement=%s)",
            circuit,
            measurement,
        )
        return cls(streams, compat=True)

    @property
    def compat_mode(self) -> bool:
        return self._compat

    def _stream(self, name: StreamKey) -> _Stream:
        stream_name = StreamName.parse(name)
        try:
            return self._streams[stream_name]
        except KeyError:
            raise UnknownStreamError(
                f"RNG stream {stream_name.value!r} is not registered"
            ) from None

    def draw_uniform(self, name: StreamKey) -> float:
        """
        Draws one float in [0, 1) from the named stream
        """
        return self._stream(name).uniform()

    def draw_normal(
        self, name: StreamKey, shape: Tuple[int, ...] = ()
    ) -> jnp.ndarray:
        """
        Draws standard normal samples of the given shape with a single key
        """
        return self._stream(name).normal(tuple(shape))

    def draw_count(self, name: StreamKey) -> int:
        """
        Number of draws taken from the source behind `name`. Aliased names
        report the shared count.
        """
        return self._stream(name).draws

    def seed(self, name: StreamKey) -> int:
        return self._stream(name).seed

    def snapshot(self) -> "RNGStreamRegistry":
        """
        Returns an independent copy positioned at the current cursors,
        aliasing between names is preserved
        """
        copies: Dict[int, _Stream] = {}
        streams = {}
        for name, stream in self._streams.items():
            if id(stream) not in copies:
                copies[id(stream)] = stream.copy()
            streams[name] = copies[id(stream)]
        return RNGStreamRegistry(streams, compat=self._compat)

    def __repr__(self) -> str:
        mode = "compat" if self._compat else "default"
        seeds = ", ".join(f"{n.value}={s.seed}" for n, s in self._streams.items())
        return f"RNGStreamRegistry({mode}: {seeds})"


def create(seeds: Mapping[StreamKey, int]) -> RNGStreamRegistry:
    return RNGStreamRegistry.create(seeds)


def draw_uniform(registry: RNGStreamRegistry, name: StreamKey) -> float:
    return registry.draw_uniform(name)
