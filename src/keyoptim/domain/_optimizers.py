"""
Domain-level optimizer contracts for KeyOptim.

This module defines the `IOptimMethod` protocol, which specifies the minimal
interface any interchangeable optimization rule must satisfy so that a
training loop can swap rules without code changes.

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers are stateless objects. All per-run state lives in a caller-owned
  mapping that is passed to every call, so each parameter group owns its own
  state record.
- Gradient computation is outside the scope of this protocol; it is supplied
  by the caller as an evaluation function.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from ._tensor import ITensor

# feval: parameter -> (loss, gradient)
FEval = Callable[[ITensor], Tuple[float, ITensor]]


@runtime_checkable
class IOptimMethod(Protocol):
    """
    Optimization-rule interface contract.

    Required methods
    ----------------
    - `step(...)` evaluates the objective once and updates the parameter
      in-place, advancing the state mapping.
    - `reset_state(state)` discards accumulated history from a state mapping.
    """

    def step(
        self,
        evaluate: FEval,
        parameter: ITensor,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[MutableMapping[str, Any]] = None,
    ) -> Tuple[ITensor, List[float]]:
        """
        Apply one optimization step.

        Returns
        -------
        tuple[ITensor, list[float]]
            The (mutated) parameter and a one-element list holding the loss
            evaluated *before* the update.
        """
        ...

    def reset_state(
        self, state: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        """
        Remove accumulated history from `state` and return it.
        """
        ...
