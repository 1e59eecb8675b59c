# flake8: noqa

from .interfaces import StateHandleLike  # noqa: F401
from .scope import StateScope, with_state  # noqa: F401
from .trace import AppliedGate, TraceState  # noqa: F401
