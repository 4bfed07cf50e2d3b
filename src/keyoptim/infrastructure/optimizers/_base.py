"""
Shared base class for KeyOptim optimization rules.

`OptimMethod` implements the parts of the optimizer contract that do not
depend on a particular update rule: resolving the effective config/state
containers, reporting the current learning rate, and checkpointing a state
table to disk. Subclasses implement `step` and `reset_state`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Optional, Tuple, Union

from ...domain._errors import MissingStateError
from ...domain._optimizers import FEval, IOptimMethod
from ...domain._tensor import ITensor
from .._serialization import load_state as _load_state
from .._serialization import save_state as _save_state
from .._table import Table


class OptimMethod(ABC, IOptimMethod):
    """
    Abstract optimization rule.

    Optimizers derived from this class hold no per-run state. Everything that
    must survive between calls lives in the caller-owned `state` mapping.
    """

    @staticmethod
    def _resolve(
        config: Optional[Any], state: Optional[MutableMapping[str, Any]]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """
        Apply the config/state fallback rules.

        - ``config is None`` -> a fresh empty `Table` (all defaults).
        - ``state is None``  -> the effective config mapping is the state.

        Raises
        ------
        MissingStateError
            If `state` is None and the config is not a mutable mapping.
        """
        _config = Table() if config is None else config
        if state is not None:
            return _config, state
        if not isinstance(_config, MutableMapping):
            raise MissingStateError(type(_config).__name__)
        return _config, _config

    @abstractmethod
    def step(
        self,
        evaluate: FEval,
        parameter: ITensor,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[MutableMapping[str, Any]] = None,
    ) -> Tuple[ITensor, List[float]]:
        """
        Evaluate the objective once and update `parameter` in-place.
        """
        raise NotImplementedError

    @abstractmethod
    def reset_state(self, state: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """
        Discard accumulated history from `state`.
        """
        raise NotImplementedError

    @abstractmethod
    def get_learning_rate(
        self,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[MutableMapping[str, Any]] = None,
    ) -> float:
        """
        Return the learning rate the next `step` would use.
        """
        raise NotImplementedError

    def get_hyper_parameter(
        self,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[MutableMapping[str, Any]] = None,
    ) -> str:
        """
        Return a short progress string describing the current hyperparameters.
        """
        return f"Current learning rate is {self.get_learning_rate(config, state)}. "

    def save_state(
        self,
        path: Union[str, Path],
        state: Mapping[str, Any],
        *,
        overwrite: bool = False,
    ) -> Path:
        """
        Checkpoint `state` to a JSON file.

        Tensor buffers are written by value; later in-place updates to the live
        state do not affect the file.

        Raises
        ------
        FileExistsError
            If `path` exists and `overwrite` is False.
        """
        return _save_state(path, state, overwrite=overwrite)

    def load_state(self, path: Union[str, Path]) -> Table:
        """
        Load a state table written by `save_state`.

        The returned table owns fresh tensor buffers.
        """
        return _load_state(path)
