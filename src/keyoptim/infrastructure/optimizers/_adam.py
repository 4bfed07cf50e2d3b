"""
Adam optimizer implementation.

This module provides the KeyOptim implementation of the Adam optimization
algorithm (Kingma & Ba, https://arxiv.org/abs/1412.6980). The optimizer
itself is stateless: hyperparameters are read from a caller-supplied config
mapping and the moment estimates live in a caller-supplied state mapping.

Design notes
------------
- The objective is supplied as an evaluation function ``feval(x) -> (f(x),
  df/dx)`` and is called exactly once per step, on the pre-update parameter.
- Updates are applied with in-place tensor operations. The parameter and the
  moment buffers keep their storage identity across calls, so anything
  holding a reference to them (including a checkpoint taken by reference)
  observes every update.
- If the caller passes no separate state, the config mapping doubles as the
  state container.
- Optimizer math is expressed in terms of `ITensor` operations; precision is
  whatever the parameter/gradient tensors use (float32 or float64).
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Mapping, MutableMapping, Optional, Tuple

from ...domain._errors import ShapeMismatchError
from ...domain._optimizers import FEval
from ...domain._tensor import ITensor
from ._base import OptimMethod
from ._config import EVAL_COUNTER, FIRST_MOMENT, SECOND_MOMENT, AdamConfig

logger = logging.getLogger(__name__)


class Adam(OptimMethod):
    """
    Adam optimizer.

    Update rule
    -----------
    Let ``g`` be the gradient returned by ``feval`` and ``t`` the number of
    completed steps before this call:

        clr   = lr / (1 + t * lrd)
        t     = t + 1
        s     = beta1 * s + (1 - beta1) * g
        r     = beta2 * r + (1 - beta2) * g * g
        denom = sqrt(r) + eps

        step_size = clr * sqrt(1 - beta2^t) / (1 - beta1^t)
        x <- x - step_size * s / denom

    The bias corrections are folded into the scalar step size instead of
    being applied to ``s`` and ``r``, so ``eps`` is added to the
    *uncorrected* ``sqrt(r)``.

    Config keys
    -----------
    ``learningRate`` (1e-3), ``learningRateDecay`` (0.0), ``beta1`` (0.9),
    ``beta2`` (0.999), ``epsilon`` (1e-8). See `AdamConfig`.

    State keys
    ----------
    ``evalCounter`` : int
        Number of completed steps.
    ``firstMoment`` : Tensor
        Exponential moving average of the gradient.
    ``secondMoment`` : Tensor
        Exponential moving average of the squared gradient.

    Notes
    -----
    - Not thread-safe. Concurrent steps on the same state or parameter must be
      serialized by the caller.
    """

    def step(
        self,
        evaluate: FEval,
        parameter: ITensor,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[MutableMapping[str, Any]] = None,
    ) -> Tuple[ITensor, List[float]]:
        """
        Apply one Adam update to `parameter`.

        Parameters
        ----------
        evaluate : Callable[[ITensor], tuple[float, ITensor]]
            Evaluation function returning the loss and the gradient at the
            current parameter value. Called exactly once.
        parameter : ITensor
            Point of evaluation; updated in-place.
        config : Mapping[str, Any] or AdamConfig, optional
            Hyperparameters. Missing keys use defaults; None means all defaults.
        state : MutableMapping[str, Any], optional
            Optimizer state, modified in-place. If None, `config` is used as
            the state container.

        Returns
        -------
        tuple[ITensor, list[float]]
            The updated parameter (same object) and ``[f(x)]`` evaluated
            before the update.

        Raises
        ------
        InvalidHyperparameterError
            If a hyperparameter is out of range. Raised before `evaluate`.
        ShapeMismatchError
            If the gradient or a stored moment buffer does not match the
            parameter shape. Nothing is mutated in that case.
        MissingStateError
            If `state` is None and `config` cannot hold state.
        """
        _config, _state = self._resolve(config, state)
        hp = AdamConfig.from_mapping(_config)

        fx, dfdx = evaluate(parameter)

        timestep = int(_state.get(EVAL_COUNTER, 0))

        if tuple(dfdx.shape) != tuple(parameter.shape):
            raise ShapeMismatchError("adam_step", parameter.shape, dfdx.shape)

        # Each moment is reused if stored, zero-seeded otherwise.
        s = _state.get(FIRST_MOMENT)
        r = _state.get(SECOND_MOMENT)
        for buf in (s, r):
            if buf is not None and tuple(buf.shape) != tuple(dfdx.shape):
                raise ShapeMismatchError("adam_step", buf.shape, dfdx.shape)
        if s is None:
            logger.debug("allocating Adam first moment of shape %s", dfdx.shape)
            s = dfdx.new_zeros()
        if r is None:
            logger.debug("allocating Adam second moment of shape %s", dfdx.shape)
            r = dfdx.new_zeros()
        denom = dfdx.new_zeros()

        clr = hp.decayed_learning_rate(timestep)

        timestep = timestep + 1

        s.mul_(hp.beta1).add_(dfdx, alpha=1 - hp.beta1)
        r.mul_(hp.beta2).addcmul_(dfdx, dfdx, value=1 - hp.beta2)
        denom.copy_from(r)
        denom.sqrt_().add_(hp.epsilon)

        bias_correction1, bias_correction2 = hp.bias_corrections(timestep)
        step_size = clr * math.sqrt(bias_correction2) / bias_correction1
        parameter.addcdiv_(s, denom, value=-step_size)

        _state[EVAL_COUNTER] = timestep
        _state[FIRST_MOMENT] = s
        _state[SECOND_MOMENT] = r

        logger.debug(
            "adam step %d: clr=%.6g step_size=%.6g loss=%s",
            timestep,
            clr,
            step_size,
            fx,
        )
        return parameter, [fx]

    def reset_state(self, state: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """
        Drop the moment buffers from `state`, keeping ``evalCounter``.

        Idempotent: calling it on a state without moments is a no-op. The next
        `step` re-allocates zero moments.

        Returns
        -------
        MutableMapping[str, Any]
            The same `state` object.
        """
        state.pop(FIRST_MOMENT, None)
        state.pop(SECOND_MOMENT, None)
        logger.debug("cleared Adam moment buffers")
        return state

    def get_learning_rate(
        self,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[MutableMapping[str, Any]] = None,
    ) -> float:
        """
        Return ``lr / (1 + evalCounter * lrd)``, the rate the next step uses.

        Config/state resolution follows the same rules as `step`. Nothing is
        mutated.
        """
        _config, _state = self._resolve(config, state)
        hp = AdamConfig.from_mapping(_config)
        return hp.decayed_learning_rate(int(_state.get(EVAL_COUNTER, 0)))
