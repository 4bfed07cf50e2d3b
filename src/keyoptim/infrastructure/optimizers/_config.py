"""
Typed hyperparameter record for the Adam optimizer.

Callers hand optimizers a string-keyed mapping (often the same mapping that
also stores optimizer state). `AdamConfig` resolves that mapping once per
call into named, validated fields so the update rule never performs stringly
typed lookups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional

from ...domain._errors import InvalidHyperparameterError
from .._table import Table

logger = logging.getLogger(__name__)

# Mapping keys
LEARNING_RATE = "learningRate"
LEARNING_RATE_DECAY = "learningRateDecay"
BETA1 = "beta1"
BETA2 = "beta2"
EPSILON = "epsilon"

# Keys written by optimizers when the config mapping doubles as state
EVAL_COUNTER = "evalCounter"
FIRST_MOMENT = "firstMoment"
SECOND_MOMENT = "secondMoment"


@dataclass(frozen=True)
class AdamConfig:
    """
    Adam hyperparameters.

    Attributes
    ----------
    learning_rate : float
        Base step size (``learningRate``). Must be > 0. Defaults to 1e-3.
    learning_rate_decay : float
        Per-iteration decay factor (``learningRateDecay``). Must be >= 0.
        Defaults to 0.0.
    beta1 : float
        Decay rate of the first-moment estimate (``beta1``), in [0, 1).
        Defaults to 0.9.
    beta2 : float
        Decay rate of the second-moment estimate (``beta2``), in [0, 1).
        Defaults to 0.999.
    epsilon : float
        Additive stabilizer in the denominator (``epsilon``). Must be > 0.
        Defaults to 1e-8.
    """

    learning_rate: float = 1e-3
    learning_rate_decay: float = 0.0
    beta1: float = 0.9
    beta2: float = 0.999
    epsilon: float = 1e-8

    KNOWN_KEYS: ClassVar[frozenset] = frozenset(
        {LEARNING_RATE, LEARNING_RATE_DECAY, BETA1, BETA2, EPSILON}
    )
    STATE_KEYS: ClassVar[frozenset] = frozenset(
        {EVAL_COUNTER, FIRST_MOMENT, SECOND_MOMENT}
    )

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]]) -> "AdamConfig":
        """
        Resolve a string-keyed mapping into an `AdamConfig`.

        Missing keys fall back to the defaults; ``None`` is treated as an empty
        mapping. Unrecognized keys are ignored (and logged at DEBUG), since the
        mapping may also carry optimizer state or settings for other rules.

        Raises
        ------
        InvalidHyperparameterError
            If a resolved value is outside its valid range.
        """
        if config is None:
            return cls()
        if isinstance(config, cls):
            return config

        unknown = [
            k for k in config if k not in cls.KNOWN_KEYS and k not in cls.STATE_KEYS
        ]
        if unknown:
            logger.debug("ignoring unrecognized Adam config keys: %s", unknown)

        d = cls()
        return cls(
            learning_rate=float(config.get(LEARNING_RATE, d.learning_rate)),
            learning_rate_decay=float(
                config.get(LEARNING_RATE_DECAY, d.learning_rate_decay)
            ),
            beta1=float(config.get(BETA1, d.beta1)),
            beta2=float(config.get(BETA2, d.beta2)),
            epsilon=float(config.get(EPSILON, d.epsilon)),
        )

    def validate(self) -> None:
        """
        Check every field against its valid range.

        Raises
        ------
        InvalidHyperparameterError
            On the first out-of-range field.
        """
        if not self.learning_rate > 0.0:
            raise InvalidHyperparameterError(LEARNING_RATE, self.learning_rate, "> 0")
        if not self.learning_rate_decay >= 0.0:
            raise InvalidHyperparameterError(
                LEARNING_RATE_DECAY, self.learning_rate_decay, ">= 0"
            )
        if not 0.0 <= self.beta1 < 1.0:
            raise InvalidHyperparameterError(BETA1, self.beta1, "in [0, 1)")
        if not 0.0 <= self.beta2 < 1.0:
            raise InvalidHyperparameterError(BETA2, self.beta2, "in [0, 1)")
        if not self.epsilon > 0.0:
            raise InvalidHyperparameterError(EPSILON, self.epsilon, "> 0")

    def to_table(self) -> Table:
        """
        Return these hyperparameters as a fresh `Table` keyed by mapping names.
        """
        return Table(
            {
                LEARNING_RATE: self.learning_rate,
                LEARNING_RATE_DECAY: self.learning_rate_decay,
                BETA1: self.beta1,
                BETA2: self.beta2,
                EPSILON: self.epsilon,
            }
        )

    def decayed_learning_rate(self, timestep: int) -> float:
        """
        Learning rate for a step taken after `timestep` completed steps:
        ``learning_rate / (1 + timestep * learning_rate_decay)``.
        """
        return self.learning_rate / (1 + timestep * self.learning_rate_decay)

    def bias_corrections(self, timestep: int) -> tuple[float, float]:
        """
        Return ``(1 - beta1^timestep, 1 - beta2^timestep)``.

        `timestep` is the post-increment step count, so the first step uses 1.
        """
        return 1 - self.beta1**timestep, 1 - self.beta2**timestep
