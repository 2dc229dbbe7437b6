"""Processed events and tables of them."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .cuts import Cut, parse_cut

SCALAR_COLUMNS = ("ts", "ts2_m101", "ts2_m102", "ts2_m103", "evt")
HIT_COLUMNS = {"A1": "a1", "B1": "b1", "A2": "a2", "B2": "b2", "A3": "a3", "B3": "b3"}


@dataclass(frozen=True)
class Event:
    """One coincidence of the three modules: timestamps and hit bar positions."""

    ts: int
    ts2_m101: int
    ts2_m102: int
    ts2_m103: int
    evt: int
    a1: tuple[int, ...] = ()
    b1: tuple[int, ...] = ()
    a2: tuple[int, ...] = ()
    b2: tuple[int, ...] = ()
    a3: tuple[int, ...] = ()
    b3: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        for attr in HIT_COLUMNS.values():
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

    def to_dict(self) -> dict[str, Any]:
        """All columns by name, including the hit counts ``nA1`` … ``nB3``."""
        data: dict[str, Any] = {name: getattr(self, name) for name in SCALAR_COLUMNS}
        for column, attr in HIT_COLUMNS.items():
            data[column] = list(getattr(self, attr))
        for column, attr in HIT_COLUMNS.items():
            data["n" + column] = len(getattr(self, attr))
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Build an event from a column mapping; derived counts are ignored."""
        try:
            scalars = {name: int(data[name]) for name in SCALAR_COLUMNS}
            hits = {attr: tuple(int(x) for x in data[column]) for column, attr in HIT_COLUMNS.items()}
        except KeyError as exc:
            raise ValueError(f"missing column {exc.args[0]!r}") from None
        return cls(**scalars, **hits)


@dataclass
class EventTable:
    """An ordered collection of events."""

    events: list[Event] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def save(self, path: str | Path) -> None:
        """Write the table as JSON lines, one event per line."""
        with open(path, "w", encoding="utf-8") as fh:
            for event in self.events:
                fh.write(json.dumps(event.to_dict()) + "\n")

    @classmethod
    def load(cls, path: str | Path) -> EventTable:
        """Read a table written by :meth:`save`."""
        with open(path, encoding="utf-8") as fh:
            return cls([Event.from_dict(json.loads(line)) for line in fh if line.strip()])

    @classmethod
    def concat(cls, tables: Iterable[EventTable]) -> EventTable:
        """Join tables one after another."""
        return cls([event for table in tables for event in table.events])

    def count(self, cut: Cut | str) -> int:
        """Number of events passing the cut."""
        selection = parse_cut(cut) if isinstance(cut, str) else cut
        return sum(1 for event in self.events if selection.evaluate(event.to_dict()))

    def filter(self, cut: Cut | str) -> EventTable:
        """A new table with only the events passing the cut."""
        selection = parse_cut(cut) if isinstance(cut, str) else cut
        return EventTable([e for e in self.events if selection.evaluate(e.to_dict())])