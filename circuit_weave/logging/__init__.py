from circuit_weave.logging.logging import (
    CircuitWeaveJSONFormatter,
    RotatingFileHandlerWithDir,
    setup_logging,
)

__all__ = ["setup_logging", "CircuitWeaveJSONFormatter", "RotatingFileHandlerWithDir"]
