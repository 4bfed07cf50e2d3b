"""
Base64 payload encoding for optimizer-state tensors.

State checkpoints store moment buffers inside JSON documents. This module
converts a `Tensor` to and from a JSON-safe payload holding its raw C-order
bytes (base64), dtype string and shape. Decoding always yields a tensor with
fresh storage.
"""

from __future__ import annotations

import base64
from typing import Any, Dict

import numpy as np

from ..tensor._tensor import Tensor


def bytes_to_b64_str(b: bytes) -> str:
    """
    Encode raw bytes into a base64 ASCII string (JSON-safe).
    """
    return base64.b64encode(b).decode("ascii")


def b64_str_to_bytes(s: str) -> bytes:
    """
    Decode a base64 ASCII string back into raw bytes.
    """
    return base64.b64decode(s.encode("ascii"))


def tensor_to_payload(t: Tensor) -> Dict[str, Any]:
    """
    Serialize a Tensor into a JSON-safe payload.

    Returns
    -------
    dict
        {
          "b64": "<base64>",
          "dtype": "<numpy dtype str>",
          "shape": [...],
          "order": "C"
        }
    """
    a = np.ascontiguousarray(t.data)
    return {
        "b64": bytes_to_b64_str(a.tobytes(order="C")),
        "dtype": a.dtype.str,  # e.g. "<f4"
        "shape": list(a.shape),
        "order": "C",
    }


def payload_to_tensor(payload: Dict[str, Any]) -> Tensor:
    """
    Deserialize a JSON payload back into a new Tensor.

    Notes
    -----
    The returned tensor owns fresh storage; it never aliases the bytes
    object or any previously loaded tensor.
    """
    b = b64_str_to_bytes(str(payload["b64"]))
    dtype = np.dtype(str(payload["dtype"]))
    shape = tuple(int(x) for x in payload["shape"])

    arr = np.frombuffer(b, dtype=dtype).reshape(shape)
    return Tensor.from_numpy(arr, dtype=dtype)
