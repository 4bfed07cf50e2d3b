"""
Tensor interface definitions.

This module defines the domain-level interface for the tensor capability the
optimizers depend on, using structural typing. The interface captures only
what an optimization rule needs: shape/dtype introspection, zero-filled
allocation, copying, and a small set of *in-place* elementwise operations.

Notes
-----
- In-place operations (suffix ``_``) must mutate the receiver's storage and
  return the receiver. They must never reallocate storage, because optimizer
  state buffers rely on a stable identity across calls.
- Scalars passed to in-place operations are interpreted in the receiver's
  precision; the contract is expressed over any floating element type.
"""

from __future__ import annotations

from typing import Any, Protocol, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a mutable, fixed-shape, floating-point n-dimensional
    array. Concrete backends (e.g., NumPy) satisfy this contract structurally.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.
        """
        ...

    @property
    def dtype(self) -> Any:
        """
        Return the element type of the tensor.
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements.
        """
        ...

    def new_zeros(self) -> "ITensor":
        """
        Allocate a zero-filled tensor with the same shape and dtype.
        """
        ...

    def fill(self, value: Number) -> None:
        """
        Fill the tensor with a scalar value (in-place).
        """
        ...

    def copy_from(self, other: "ITensor") -> None:
        """
        Copy the values of `other` into this tensor (in-place).
        """
        ...

    def mul_(self, value: Number) -> "ITensor":
        """
        In-place scale: ``self <- self * value``.
        """
        ...

    def add_(self, other: Union["ITensor", Number], alpha: Number = 1.0) -> "ITensor":
        """
        In-place add: ``self <- self + alpha * other``.
        """
        ...

    def addcmul_(
        self, tensor1: "ITensor", tensor2: "ITensor", value: Number = 1.0
    ) -> "ITensor":
        """
        In-place ``self <- self + value * tensor1 * tensor2`` (elementwise).
        """
        ...

    def addcdiv_(
        self, tensor1: "ITensor", tensor2: "ITensor", value: Number = 1.0
    ) -> "ITensor":
        """
        In-place ``self <- self + value * tensor1 / tensor2`` (elementwise).
        """
        ...

    def sqrt_(self) -> "ITensor":
        """
        In-place elementwise square root.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return a copy of the tensor's values as an ndarray.
        """
        ...
