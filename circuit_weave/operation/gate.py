"""
Gate descriptors
"""

from enum import Enum
from typing import Any

import jax.numpy as jnp

from circuit_weave.core.errors import ValidationError


class GateType(Enum):
    """
    Gate Types
    first value in the tuple is the support (number of sites the gate acts
    on), the second the list of required parameters, the third a short label
    and the fourth whether the gate is sampled at application time (and so
    has no fixed operator)

    Notes
    -----
    Last element in Tuples is required (to be unique),
    because if two tuples are the same it is assigned
    the same pointer and comparisons don't work then
    """

    PauliX = (1, [], "X", False, 1)
    PauliY = (1, [], "Y", False, 2)
    PauliZ = (1, [], "Z", False, 3)
    Projection = (1, ["outcome"], "P", False, 4)
    Measurement = (1, ["axis"], "M", True, 5)
    Reset = (1, [], "Rst", True, 6)
    HaarRandom = (2, [], "Haar", True, 7)
    CZ = (2, [], "CZ", False, 8)
    SpinSectorProjection = (2, ["projector"], "Ps", False, 9)
    SpinSectorMeasurement = (2, ["sectors"], "Ms", True, 10)

    def __init__(
        self,
        support: int,
        required_params: list,
        label: str,
        sampled: bool,
        gate_id: int,
    ) -> None:
        self.support = support
        self.required_params = required_params
        self.label = label
        self.sampled = sampled

    def validate(self, **kwargs: Any) -> None:
        """
        Checks gate specific parameter constraints

        Raises
        ------
        ValidationError
            If a parameter is out of its allowed range
        """
        match self:
            case GateType.Projection:
                if kwargs["outcome"] not in (0, 1):
                    raise ValidationError(
                        f"Projection outcome must be 0 or 1, got {kwargs['outcome']}"
                    )
            case GateType.Measurement:
                if kwargs["axis"] != "Z":
                    raise ValidationError(
                        f"Only the 'Z' axis is supported, got {kwargs['axis']!r}"
                    )
            case GateType.SpinSectorProjection:
                if jnp.shape(kwargs["projector"]) != (9, 9):
                    raise ValidationError(
                        "SpinSectorProjection requires a 9x9 projector for "
                        "two spin-1 sites"
                    )
            case GateType.SpinSectorMeasurement:
                sectors = list(kwargs["sectors"])
                if not sectors:
                    raise ValidationError("sectors must be non-empty")
                if any(s not in (0, 1, 2) for s in sectors):
                    raise ValidationError(
                        "sectors must be a subset of {0, 1, 2} for two spin-1 sites"
                    )

    def compute_operator(self, **kwargs: Any) -> jnp.ndarray:
        """
        Generates the operator for this gate

        Parameters
        ----------
        **kwargs: Any
            Gate parameters

        Raises
        ------
        ValueError
            For sampled gates, whose action depends on random draws or on
            the state and is carried out by the state itself
        """
        match self:
            case GateType.PauliX:
                return jnp.array([[0, 1], [1, 0]], dtype=jnp.complex64)
            case GateType.PauliY:
                return jnp.array([[0, -1j], [1j, 0]], dtype=jnp.complex64)
            case GateType.PauliZ:
                return jnp.array([[1, 0], [0, -1]], dtype=jnp.complex64)
            case GateType.Projection:
                op = jnp.zeros((2, 2), dtype=jnp.complex64)
                return op.at[kwargs["outcome"], kwargs["outcome"]].set(1)
            case GateType.CZ:
                return jnp.diag(jnp.array([1, 1, 1, -1], dtype=jnp.complex64))
            case GateType.SpinSectorProjection:
                return jnp.asarray(kwargs["projector"])
        raise ValueError(
            f"{self.name} gate cannot be built as a single operator; "
            "it is applied by the state"
        )


def _params_equal(a: Any, b: Any) -> bool:
    if hasattr(a, "shape") or hasattr(b, "shape"):
        return bool(jnp.array_equal(jnp.asarray(a), jnp.asarray(b)))
    return a == b


class Gate:
    """
    Immutable gate descriptor: a `GateType` and its parameters.

    The descriptor carries no state; the state handle decides how a gate is
    applied to a site group.

    >>> Gate(GateType.Projection, outcome=0)
    >>> Gate(GateType.HaarRandom)
    """

    __slots__ = ("_gate_type", "_params")

    def __init__(self, gate_type: GateType, **kwargs: Any) -> None:
        if not isinstance(gate_type, GateType):
            raise ValidationError(f"Expected a GateType, got {gate_type!r}")
        for param in gate_type.required_params:
            if param not in kwargs:
                raise KeyError(
                    f"The '{param}' argument is required for {gate_type.name}"
                )
        if gate_type is GateType.SpinSectorMeasurement:
            kwargs["sectors"] = tuple(kwargs["sectors"])
        gate_type.validate(**kwargs)
        object.__setattr__(self, "_gate_type", gate_type)
        object.__setattr__(self, "_params", dict(kwargs))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Gate descriptors are immutable")

    def __repr__(self) -> str:
        if not self._params:
            return f"{self._gate_type.__class__.__name__}.{self._gate_type.name}"
        params = ", ".join(
            f"{k}={'<array>' if hasattr(v, 'shape') else repr(v)}"
            for k, v in self._params.items()
        )
        return f"{self._gate_type.__class__.__name__}.{self._gate_type.name}({params})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gate):
            return NotImplemented
        if self._gate_type is not other._gate_type:
            return False
        if self._params.keys() != other._params.keys():
            return False
        return all(
            _params_equal(v, other._params[k]) for k, v in self._params.items()
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def gate_type(self) -> GateType:
        return self._gate_type

    @property
    def params(self) -> dict:
        return dict(self._params)

    @property
    def support(self) -> int:
        return self._gate_type.support

    @property
    def label(self) -> str:
        return self._gate_type.label

    @property
    def sampled(self) -> bool:
        return self._gate_type.sampled

    @property
    def operator(self) -> jnp.ndarray:
        return self._gate_type.compute_operator(**self._params)
