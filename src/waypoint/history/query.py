"""Immutable query string parameters of the current path.

Implements ``Mapping[str, str]``; repeated keys are available through
``get_list``.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Parsed query string as field name -> list of values.
        _raw: Raw query string (without the leading ``?``).

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: str = "") -> None:
        object.__setattr__(self, "_raw", query_string)
        parsed = parse_qs(query_string, keep_blank_values=True)
        object.__setattr__(self, "_data", parsed)

    @classmethod
    def split(cls, full_path: str) -> tuple[str, "QueryParams"]:
        """Split *full_path* on the first ``?`` into path and parameters."""
        path, sep, query = full_path.partition("?")
        return path, cls(query if sep else "")

    @property
    def raw(self) -> str:
        return self._raw

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))
