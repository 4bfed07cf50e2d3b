"""
KeyOptim: stateless first-order optimization rules over in-place tensors.

Typical usage::

    from keyoptim import Adam, T, Tensor

    x = Tensor.from_numpy([1.0, 2.0])
    config, state = T(learningRate=1e-2), T()
    for _ in range(100):
        x, (loss,) = Adam().step(feval, x, config, state)
"""

from .domain import (
    IOptimMethod,
    ITensor,
    InvalidHyperparameterError,
    MissingStateError,
    ShapeMismatchError,
)
from .infrastructure import (
    Adam,
    AdamConfig,
    OptimMethod,
    T,
    Table,
    Tensor,
    load_state,
    save_state,
)

__all__ = [
    "Adam",
    "AdamConfig",
    "IOptimMethod",
    "ITensor",
    "InvalidHyperparameterError",
    "MissingStateError",
    "OptimMethod",
    "ShapeMismatchError",
    "T",
    "Table",
    "Tensor",
    "load_state",
    "save_state",
]
