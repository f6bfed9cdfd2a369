"""Ordered accumulation of byte sizes per log type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

import pandas as pd

ORDERINGS = ("first-seen", "size", "name")


@dataclass
class TallyRow:
    type: str
    size: int
    lines: int

    def as_dict(self) -> Dict[str, object]:
        return {"type": self.type, "size": self.size, "lines": self.lines}


class TypeTally:
    """Mapping of type name to accumulated size, kept in first-seen order."""

    def __init__(self) -> None:
        self._sizes: Dict[str, int] = {}
        self._lines: Dict[str, int] = {}

    def add(self, type_name: str, size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ValueError(f"size must be a non-negative integer, got {size!r}")
        self._sizes[type_name] = self._sizes.get(type_name, 0) + size
        self._lines[type_name] = self._lines.get(type_name, 0) + 1

    def __len__(self) -> int:
        return len(self._sizes)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._sizes

    def __getitem__(self, type_name: str) -> int:
        return self._sizes[type_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sizes)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._sizes.items())

    def line_count(self, type_name: str) -> int:
        return self._lines[type_name]

    @property
    def total(self) -> int:
        return sum(self._sizes.values())

    @property
    def total_lines(self) -> int:
        return sum(self._lines.values())

    def ordered(self, by: str = "first-seen") -> List[TallyRow]:
        """Return the rows in the requested order.

        ``size`` sorts descending and ``name`` ascending; both are stable, so
        ties keep their first-seen order.
        """

        rows = [TallyRow(type=name, size=size, lines=self._lines[name]) for name, size in self._sizes.items()]
        if by == "first-seen":
            return rows
        if by == "size":
            return sorted(rows, key=lambda row: row.size, reverse=True)
        if by == "name":
            return sorted(rows, key=lambda row: row.type)
        raise ValueError(f"Unsupported ordering: {by}")

    def to_frame(self, by: str = "first-seen") -> pd.DataFrame:
        rows = self.ordered(by)
        return pd.DataFrame(
            {
                "type": [row.type for row in rows],
                "size": pd.Series([row.size for row in rows], dtype="int64"),
                "lines": pd.Series([row.lines for row in rows], dtype="int64"),
            }
        )


__all__ = ["ORDERINGS", "TallyRow", "TypeTally"]
