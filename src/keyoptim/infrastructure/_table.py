"""
String-keyed mutable table used for optimizer configuration and state.

A `Table` is an ordinary `MutableMapping[str, Any]` with two conveniences
borrowed from Lua/Torch-style tables: `get_or_else` and a chainable,
idempotent `delete`. Optimizers accept any mutable mapping (including a plain
`dict`); `Table` is what the library itself allocates.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, MutableMapping


class Table(MutableMapping[str, Any]):
    """
    Mutable mapping from string keys to arbitrary values.

    Notes
    -----
    - Values are stored by reference. Tensors placed in a table are not
      copied, so a table holding optimizer moments shares those buffers with
      every other holder of the same tensors.
    - Equality compares contents like a dict.
    """

    __slots__ = ("_entries",)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._entries: Dict[str, Any] = dict(*args, **kwargs)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._entries.items())
        return f"T({body})"

    def get_or_else(self, key: str, default: Any) -> Any:
        """
        Return the value stored under `key`, or `default` if absent.

        Unlike `dict.get`, a stored ``None`` is returned as-is.
        """
        if key in self._entries:
            return self._entries[key]
        return default

    def delete(self, key: str) -> "Table":
        """
        Remove `key` if present and return this table.

        Deleting a missing key is a no-op.
        """
        self._entries.pop(key, None)
        return self


def T(*args: Any, **kwargs: Any) -> Table:
    """
    Build a `Table`, e.g. ``T(learningRate=1e-2, beta1=0.8)``.
    """
    return Table(*args, **kwargs)
