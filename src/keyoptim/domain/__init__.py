from ._errors import InvalidHyperparameterError, MissingStateError, ShapeMismatchError
from ._optimizers import FEval, IOptimMethod
from ._tensor import ITensor

__all__ = [
    "FEval",
    "IOptimMethod",
    "ITensor",
    "InvalidHyperparameterError",
    "MissingStateError",
    "ShapeMismatchError",
]
