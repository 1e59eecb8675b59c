import random
from typing import Any, Callable, Union

from circuit_weave.core.errors import ValidationError

# Recording presets accepted as the default policy. Kept as plain strings
# here so the config does not import the circuit package.
_POLICY_PRESETS = ("every-trial", "every-operation", "final-trial-only")


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._random_seed = random.randint(0, 2**31 - 1)
            self._probability_tolerance = 1e-10
            self._default_policy: Union[str, Callable] = "every-trial"

    def set_seed(self, seed: int) -> None:
        """
        Seed used when a circuit is previewed without an explicit
        registry or seed
        Parameters
        ----------
        seed: int
            Seed to be used by random processes
        """
        self._random_seed = int(seed)

    @property
    def random_seed(self) -> int:
        return self._random_seed

    def set_probability_tolerance(self, tolerance: float) -> None:
        """
        Slack allowed when checking that stochastic outcome probabilities
        sum to at most one
        """
        tolerance = float(tolerance)
        if tolerance < 0:
            raise ValidationError(
                f"Probability tolerance must be non-negative, got {tolerance}"
            )
        self._probability_tolerance = tolerance

    @property
    def probability_tolerance(self) -> float:
        return self._probability_tolerance

    def set_default_policy(self, policy: Union[str, Callable]) -> None:
        value = getattr(policy, "value", policy)
        if not callable(value) and value not in _POLICY_PRESETS:
            raise ValidationError(
                f"Unknown recording policy: {policy!r}. "
                f"Valid presets: {', '.join(_POLICY_PRESETS)}"
            )
        self._default_policy = value

    @property
    def default_policy(self) -> Union[str, Callable]:
        return self._default_policy


class Session:
    """
    Lightweight context manager to scope Config settings per run.

    Example:
        with Session(seed=0, default_policy="every-operation"):
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    """

    def __init__(
        self,
        *,
        seed: int | None = None,
        probability_tolerance: float | None = None,
        default_policy: Union[str, Callable, None] = None,
    ) -> None:
        cfg = Config()
        self._prev = {
            "seed": cfg.random_seed,
            "probability_tolerance": cfg.probability_tolerance,
            "default_policy": cfg.default_policy,
        }
        self._seed = seed
        self._probability_tolerance = probability_tolerance
        self._default_policy = default_policy
        self._cfg = cfg

    def __enter__(self) -> "Config":
        if self._seed is not None:
            self._cfg.set_seed(self._seed)
        if self._probability_tolerance is not None:
            self._cfg.set_probability_tolerance(self._probability_tolerance)
        if self._default_policy is not None:
            self._cfg.set_default_policy(self._default_policy)
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        self._cfg.set_seed(self._prev["seed"])
        self._cfg.set_probability_tolerance(self._prev["probability_tolerance"])
        self._cfg.set_default_policy(self._prev["default_policy"])
