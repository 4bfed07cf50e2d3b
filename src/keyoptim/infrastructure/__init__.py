from ._serialization import load_state, save_state
from ._table import T, Table
from .optimizers import Adam, AdamConfig, OptimMethod
from .tensor import Tensor

__all__ = [
    "Adam",
    "AdamConfig",
    "OptimMethod",
    "T",
    "Table",
    "Tensor",
    "load_state",
    "save_state",
]
