from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ParameterSpec:
    """
    One declared form parameter.

    `options` keeps the author's order; only [label, value] pairs are kept,
    bare choices map to themselves and need no translation.
    """

    name: str
    default_value: Any = None
    options: Tuple[Tuple[Any, Any], ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, name: str, raw: Dict[str, Any]) -> "ParameterSpec":
        pairs: List[Tuple[Any, Any]] = []
        opts = raw.get("options")
        if isinstance(opts, list):
            for opt in opts:
                if isinstance(opt, (list, tuple)) and len(opt) >= 2:
                    pairs.append((opt[0], opt[1]))
        return cls(name=str(name), default_value=raw.get("value"), options=tuple(pairs))

    def translate(self, value: Any) -> Any:
        """Map a label to its value; anything that is not a label passes through."""
        if not self.options or not isinstance(value, Hashable):
            return value
        labels = dict(self.options)
        return labels.get(value, value)


class OptionSet(Mapping):
    """Read-only mapping of resolved option names to values."""

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = dict(data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"OptionSet({self._data!r})"

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._data)
