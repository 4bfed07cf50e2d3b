"""
Concrete Tensor implementation (NumPy backend).

This module provides a concrete `Tensor` that satisfies the domain-level
`ITensor` protocol. Storage is a NumPy ndarray allocated once at construction
and never replaced: every mutating method writes into the existing buffer
(``out=`` / slice assignment), so references held by optimizer state keep
observing the same memory across calls.

Design notes
------------
- Only floating element types are supported (float32 and float64). Integer
  storage would silently truncate optimizer updates.
- Scalars are converted to the tensor's dtype before arithmetic, so float32
  tensors stay in float32 precision end to end.
- Broadcasting is intentionally not supported; binary ops require exact shape
  matches and raise `ShapeMismatchError` otherwise.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np

from ...domain._tensor import ITensor
from ...domain._errors import ShapeMismatchError

Number = Union[int, float]

_SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))


def _normalize_dtype(dtype: Any) -> np.dtype:
    dt = np.dtype(dtype)
    if dt not in _SUPPORTED_DTYPES:
        raise TypeError(
            f"Unsupported tensor dtype {dt}; expected one of "
            f"{[str(d) for d in _SUPPORTED_DTYPES]}."
        )
    return dt


class Tensor(ITensor):
    """
    Concrete tensor implementation (NumPy CPU backend).

    Parameters
    ----------
    shape : tuple[int, ...]
        Tensor shape.
    dtype : np.dtype, optional
        Element dtype for this tensor. Must be float32 or float64.
        Defaults to np.float32.

    Notes
    -----
    - `_data` is a NumPy ndarray of dtype `self._dtype`, zero-initialized.
    - In-place methods return `self` so they can be chained, e.g.
      ``m.mul_(b1).add_(g, alpha=1 - b1)``.
    """

    def __init__(self, shape: tuple[int, ...], *, dtype: Any = np.float32) -> None:
        """
        Construct a new zero-filled Tensor.

        Parameters
        ----------
        shape : tuple[int, ...]
            Shape of the tensor.
        dtype : np.dtype, optional
            Element dtype (float32 or float64). Defaults to np.float32.

        Raises
        ------
        TypeError
            If `dtype` is not a supported floating type.
        """
        self._shape = tuple(int(d) for d in shape)
        self._dtype = _normalize_dtype(dtype)
        self._data = np.zeros(self._shape, dtype=self._dtype)

    def __repr__(self) -> str:
        return f"Tensor(shape={self._shape}, dtype={self._dtype})"

    # ----------------------------
    # Construction helpers
    # ----------------------------
    @staticmethod
    def from_numpy(arr: Any, *, dtype: Optional[Any] = None) -> "Tensor":
        """
        Create a Tensor holding a copy of an array-like.

        Parameters
        ----------
        arr : Any
            Array-like object accepted by `np.asarray`, including scalars and
            nested lists.
        dtype : np.dtype, optional
            Target dtype. If None, float64 inputs stay float64 and everything
            else becomes float32.

        Returns
        -------
        Tensor
            A new tensor that owns its storage.
        """
        a = np.asarray(arr)
        if dtype is None:
            dtype = np.float64 if a.dtype == np.float64 else np.float32
        t = Tensor(a.shape, dtype=dtype)
        t.copy_from_numpy(a)
        return t

    @staticmethod
    def zeros_like(other: ITensor) -> "Tensor":
        """
        Allocate a zero-filled tensor with the same shape and dtype as `other`.
        """
        return Tensor(other.shape, dtype=other.dtype)

    def new_zeros(self) -> "Tensor":
        """
        Allocate a zero-filled tensor with this tensor's shape and dtype.
        """
        return Tensor.zeros_like(self)

    # ----------------------------
    # Introspection
    # ----------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the tensor shape.
        """
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        """
        Return the element dtype of this tensor.
        """
        return self._dtype

    @property
    def data(self) -> np.ndarray:
        """
        Return the underlying ndarray (no copy).

        Notes
        -----
        Writing through this view mutates the tensor. Prefer `to_numpy()` when
        a snapshot is required.
        """
        return self._data

    def numel(self) -> int:
        """
        Return the total number of elements.
        """
        return int(self._data.size)

    def item(self) -> float:
        """
        Return the single value of a one-element tensor as a Python float.

        Raises
        ------
        ValueError
            If the tensor does not hold exactly one element.
        """
        if self._data.size != 1:
            raise ValueError(
                f"item() requires a one-element tensor, got shape {self._shape}"
            )
        return float(self._data.reshape(-1)[0])

    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the tensor values as a NumPy ndarray.
        """
        return self._data.copy()

    # ----------------------------
    # Copy / fill
    # ----------------------------
    def fill(self, value: Number) -> None:
        """
        Fill the tensor with a scalar value.
        """
        self._data.fill(self._scalar(value))

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Copy data from a NumPy array (or array-like / scalar) into this tensor.

        Raises
        ------
        ShapeMismatchError
            If the array shape differs from the tensor shape.
        """
        arr_nd = np.asarray(arr, dtype=self._dtype)
        if arr_nd.shape != self._shape:
            raise ShapeMismatchError("copy_from_numpy", self._shape, arr_nd.shape)
        self._data[...] = arr_nd

    def copy_from(self, other: ITensor) -> None:
        """
        Copy data from another tensor into this tensor (in-place).

        Values are cast to this tensor's dtype.
        """
        self._check_same_shape("copy_from", other)
        np.copyto(self._data, self._array_of(other), casting="same_kind")

    # ----------------------------
    # In-place arithmetic
    # ----------------------------
    def mul_(self, value: Number) -> "Tensor":
        """
        In-place scale: ``self <- self * value``.
        """
        np.multiply(self._data, self._scalar(value), out=self._data)
        return self

    def add_(self, other: Union[ITensor, Number], alpha: Number = 1.0) -> "Tensor":
        """
        In-place add: ``self <- self + alpha * other``.

        Parameters
        ----------
        other : ITensor or Number
            Tensor of the same shape, or a scalar.
        alpha : Number, optional
            Multiplier applied to `other`. Defaults to 1.0.
        """
        if isinstance(other, (int, float, np.floating, np.integer)):
            np.add(
                self._data,
                self._scalar(float(alpha) * float(other)),
                out=self._data,
            )
            return self

        self._check_same_shape("add_", other)
        o = self._array_of(other)
        if alpha == 1.0:
            np.add(self._data, o, out=self._data)
        else:
            np.add(self._data, self._scalar(alpha) * o, out=self._data)
        return self

    def addcmul_(
        self, tensor1: ITensor, tensor2: ITensor, value: Number = 1.0
    ) -> "Tensor":
        """
        In-place ``self <- self + value * tensor1 * tensor2``.
        """
        self._check_same_shape("addcmul_", tensor1)
        self._check_same_shape("addcmul_", tensor2)
        prod = self._array_of(tensor1) * self._array_of(tensor2)
        np.add(self._data, self._scalar(value) * prod, out=self._data)
        return self

    def addcdiv_(
        self, tensor1: ITensor, tensor2: ITensor, value: Number = 1.0
    ) -> "Tensor":
        """
        In-place ``self <- self + value * tensor1 / tensor2``.
        """
        self._check_same_shape("addcdiv_", tensor1)
        self._check_same_shape("addcdiv_", tensor2)
        quot = self._array_of(tensor1) / self._array_of(tensor2)
        np.add(self._data, self._scalar(value) * quot, out=self._data)
        return self

    def sqrt_(self) -> "Tensor":
        """
        In-place elementwise square root.
        """
        np.sqrt(self._data, out=self._data)
        return self

    # ----------------------------
    # Helpers
    # ----------------------------
    def _scalar(self, value: Number) -> np.floating:
        return self._dtype.type(value)

    def _array_of(self, other: ITensor) -> np.ndarray:
        data = getattr(other, "data", None)
        if isinstance(data, np.ndarray):
            return data.astype(self._dtype, copy=False)
        return np.asarray(other.to_numpy(), dtype=self._dtype)

    def _check_same_shape(self, op: str, other: ITensor) -> None:
        if tuple(other.shape) != self._shape:
            raise ShapeMismatchError(op, self._shape, tuple(other.shape))
