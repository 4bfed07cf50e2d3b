"""
Optimization-related exceptions for KeyOptim.

This module defines the custom errors raised by tensors and optimizers when
their inputs are structurally invalid. They exist so that caller bugs (for
example, reusing an optimizer state with a parameter of a different shape)
fail fast with an explicit message instead of surfacing as an opaque NumPy
broadcasting error several frames deep.

All errors subclass a built-in exception type so that existing
``except ValueError`` / ``except TypeError`` handlers keep working.
"""

from __future__ import annotations

from typing import Any


class ShapeMismatchError(ValueError):
    """
    Raised when two tensors that must share a shape do not.

    This error is raised by in-place tensor operations whose operands have
    different shapes, and by optimizers when a gradient or a stored moment
    buffer does not match the parameter being updated.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "addcmul_").
    expected : tuple[int, ...]
        The shape required by the operation.
    actual : tuple[int, ...]
        The shape that was supplied.
    """

    def __init__(
        self, op: str, expected: tuple[int, ...], actual: tuple[int, ...]
    ) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name that detected the mismatch.
        expected : tuple[int, ...]
            The required shape.
        actual : tuple[int, ...]
            The offending shape.
        """
        super().__init__(
            f"{op}: shape mismatch, expected {tuple(expected)} "
            f"but got {tuple(actual)}."
        )
        self.op = op
        self.expected = tuple(expected)
        self.actual = tuple(actual)


class InvalidHyperparameterError(ValueError):
    """
    Raised when an optimizer hyperparameter is outside its valid range.

    Attributes
    ----------
    name : str
        The configuration key of the offending hyperparameter.
    value : Any
        The rejected value.
    """

    def __init__(self, name: str, value: Any, requirement: str) -> None:
        """
        Initialize the InvalidHyperparameterError.

        Parameters
        ----------
        name : str
            The configuration key (e.g., "beta1").
        value : Any
            The rejected value.
        requirement : str
            Human-readable description of the valid range (e.g., "in [0, 1)").
        """
        super().__init__(f"{name} must be {requirement}, got {value!r}.")
        self.name = name
        self.value = value


class MissingStateError(TypeError):
    """
    Raised when no state container can be resolved for an optimizer step.

    When `state` is omitted, the config mapping doubles as the state
    container. That is only possible if the config is a mutable mapping; a
    frozen configuration record requires an explicit state mapping.
    """

    def __init__(self, config_type: str) -> None:
        """
        Initialize the MissingStateError.

        Parameters
        ----------
        config_type : str
            Name of the config type that cannot hold optimizer state.
        """
        super().__init__(
            f"config of type '{config_type}' cannot double as optimizer state; "
            "pass an explicit mutable `state` mapping."
        )
        self.config_type = config_type
