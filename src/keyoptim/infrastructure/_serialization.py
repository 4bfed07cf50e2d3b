"""
JSON checkpointing of optimizer state tables.

A state table mixes scalars (e.g. ``evalCounter``) and tensors (moment
buffers). Each entry is written as a tagged node:

    {"kind": "tensor", "payload": {...}}   # see encoding._b64
    {"kind": "value",  "value": <json>}

The document itself is ``{"format": "keyoptim.state", "version": 1,
"entries": {...}}``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ._table import Table
from .encoding._b64 import payload_to_tensor, tensor_to_payload
from .tensor._tensor import Tensor

logger = logging.getLogger(__name__)

STATE_FORMAT = "keyoptim.state"
STATE_VERSION = 1


def state_to_document(state: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a state mapping into a JSON-serializable document.

    Raises
    ------
    TypeError
        If an entry is neither a Tensor nor JSON-serializable.
    """
    entries: Dict[str, Any] = {}
    for key, value in state.items():
        if isinstance(value, Tensor):
            entries[str(key)] = {"kind": "tensor", "payload": tensor_to_payload(value)}
            continue
        try:
            json.dumps(value)
        except TypeError as e:
            raise TypeError(
                f"State entry '{key}' of type {type(value).__name__} "
                "is not serializable."
            ) from e
        entries[str(key)] = {"kind": "value", "value": value}
    return {"format": STATE_FORMAT, "version": STATE_VERSION, "entries": entries}


def state_from_document(doc: Mapping[str, Any]) -> Table:
    """
    Rebuild a state `Table` from a document produced by `state_to_document`.

    Raises
    ------
    ValueError
        If the document format, version, or an entry kind is not recognized.
    """
    if doc.get("format") != STATE_FORMAT:
        raise ValueError(f"Not a KeyOptim state document: {doc.get('format')!r}")
    if doc.get("version") != STATE_VERSION:
        raise ValueError(f"Unsupported state document version: {doc.get('version')!r}")

    out = Table()
    for key, node in (doc.get("entries") or {}).items():
        kind = node.get("kind")
        if kind == "tensor":
            out[key] = payload_to_tensor(node["payload"])
        elif kind == "value":
            out[key] = node["value"]
        else:
            raise ValueError(f"Unknown state entry kind '{kind}' for key '{key}'.")
    return out


def save_state(
    path: Union[str, Path], state: Mapping[str, Any], *, overwrite: bool = False
) -> Path:
    """
    Write `state` to a JSON file.

    Raises
    ------
    FileExistsError
        If `path` exists and `overwrite` is False.
    """
    p = Path(path)
    if p.exists() and not overwrite:
        raise FileExistsError(f"{p} already exists; pass overwrite=True to replace it.")
    p.write_text(json.dumps(state_to_document(state)), encoding="utf-8")
    logger.debug("saved optimizer state (%d entries) to %s", len(state), p)
    return p


def load_state(path: Union[str, Path]) -> Table:
    """
    Read a state `Table` from a JSON file written by `save_state`.
    """
    p = Path(path)
    state = state_from_document(json.loads(p.read_text(encoding="utf-8")))
    logger.debug("loaded optimizer state (%d entries) from %s", len(state), p)
    return state
