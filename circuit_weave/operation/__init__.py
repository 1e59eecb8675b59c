# flake8: noqa

from .gate import Gate, GateType  # noqa: F401
