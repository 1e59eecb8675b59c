import pytest

from circuit_weave.core.errors import (
    CircuitWeaveError,
    InactiveScopeError,
    SiteRangeError,
    UnknownStreamError,
    UnsupportedSiteShapeError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error, builtin",
    [
        (ValidationError, ValueError),
        (UnknownStreamError, KeyError),
        (SiteRangeError, IndexError),
        (UnsupportedSiteShapeError, ValueError),
        (InactiveScopeError, RuntimeError),
    ],
)
def test_errors_derive_from_base_and_builtin(error, builtin):
    assert issubclass(error, CircuitWeaveError)
    assert issubclass(error, builtin)
    with pytest.raises(builtin):
        raise error("message")


def test_unknown_stream_error_message_is_not_quoted():
    assert str(UnknownStreamError("Unknown RNG stream: 'x'")) == (
        "Unknown RNG stream: 'x'"
    )
