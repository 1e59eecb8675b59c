import pytest

from circuit_weave.circuit_weave import Config, Session
from circuit_weave.core.errors import ValidationError


def test_config_is_a_singleton():
    assert Config() is Config()


def test_session_sets_and_restores_values():
    cfg = Config()
    before_seed = cfg.random_seed
    before_tolerance = cfg.probability_tolerance
    before_policy = cfg.default_policy

    with Session(
        seed=0, probability_tolerance=1e-6, default_policy="every-operation"
    ) as c:
        assert c.random_seed == 0
        assert c.probability_tolerance == 1e-6
        assert c.default_policy == "every-operation"

    # Session should restore prior values
    assert cfg.random_seed == before_seed
    assert cfg.probability_tolerance == before_tolerance
    assert cfg.default_policy == before_policy


def test_session_can_override_subset_and_restore():
    cfg = Config()
    cfg.set_probability_tolerance(1e-10)
    cfg.set_default_policy("every-trial")

    with Session(default_policy="final-trial-only") as c:
        assert c.default_policy == "final-trial-only"
        # unspecified values remain unchanged
        assert c.probability_tolerance == 1e-10

    assert cfg.default_policy == "every-trial"


def test_nested_sessions_restore_state():
    cfg = Config()
    cfg.set_seed(5)
    cfg.set_default_policy("every-trial")

    with Session(seed=1, default_policy="every-operation") as s1:
        assert s1.random_seed == 1
        with Session(seed=2) as s2:
            assert s2.random_seed == 2
            assert s2.default_policy == "every-operation"
        # after inner session, outer session settings remain
        assert s1.random_seed == 1
        assert s1.default_policy == "every-operation"

    # after both sessions, original values restored
    assert cfg.random_seed == 5
    assert cfg.default_policy == "every-trial"


def test_session_restores_on_exception():
    cfg = Config()
    cfg.set_seed(7)
    with pytest.raises(RuntimeError):
        with Session(seed=99):
            raise RuntimeError("boom")
    assert cfg.random_seed == 7


def test_session_accepts_callable_policy():
    def predicate(ctx):
        return ctx.cumulative_count == 1

    with Session(default_policy=predicate) as c:
        assert c.default_policy is predicate


def test_invalid_config_values_raise():
    cfg = Config()
    with pytest.raises(ValidationError):
        cfg.set_probability_tolerance(-1.0)
    with pytest.raises(ValidationError):
        cfg.set_default_policy("every-other-tuesday")
