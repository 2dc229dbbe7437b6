"""Conversion of raw ``mate-m10{1,2,3}.txt`` triads into event tables."""

from __future__ import annotations

import re
import sys
from functools import lru_cache
from typing import NamedTuple

from .events import Event, EventTable
from .paths import PathConfig
from .validator import RAW_SUFFIXES, list_prefixes

COMBINED_SUFFIX = "combined_output.txt"
TABLE_SUFFIX = "output.jsonl"

_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)", re.ASCII)
_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_INT32 = (-(2**31), 2**31 - 1)
_INT64 = (-(2**63), 2**63 - 1)


class TriadLine(NamedTuple):
    """One parsed line of a triad: the event and its combined text line."""

    event: Event
    combined: str


def _parse_int(text: str, limits: tuple[int, int]) -> int:
    match = _INT_RE.match(text)
    if not match:
        raise ValueError(f"invalid integer {text!r}")
    value = int(match.group(1))
    if not limits[0] <= value <= limits[1]:
        raise ValueError(f"integer out of range {text!r}")
    return value


@lru_cache(maxsize=None)
def hex_to_bin(value: str) -> str:
    """Return the low byte of a hexadecimal value as eight ``0``/``1`` characters.

    Values that cannot be read give ``"00000000"`` and a warning.
    """
    match = _HEX_RE.match(value)
    if match:
        number = int(match.group(2), 16)
        if match.group(1) == "-":
            number = -number
        if _INT32[0] <= number <= _INT32[1]:
            return format(number & 0xFF, "08b")
    print(f"Warn: hex '{value}' inválido", file=sys.stderr)
    return "0" * 8


def bin_to_positions(bits: str) -> list[int]:
    """One-based positions of the set bits, counted from the rightmost character."""
    return [i for i, ch in enumerate(reversed(bits), start=1) if ch == "1"]


def positions_to_string(positions: list[int]) -> str:
    """Format positions as ``(p1,p2,...)``; no positions gives ``(0)``."""
    if not positions:
        return "(0)"
    return "(" + ",".join(str(p) for p in positions) + ")"


def _fields(line: str, count: int) -> list[str]:
    parts = line.split(",")
    if parts and parts[-1] == "" and len(parts) > count:
        parts.pop()
    parts = parts[:count]
    return parts + [""] * (count - len(parts))


def _planes(bb: str, ba: str, aa: str) -> tuple[list[int], list[int]]:
    middle = hex_to_bin(ba)
    b_bits = hex_to_bin(bb) + middle[:4]
    a_bits = middle[4:] + hex_to_bin(aa)
    return bin_to_positions(a_bits), bin_to_positions(b_bits)


def parse_triad_line(line101: str, line102: str, line103: str) -> TriadLine:
    """Combine one line from each module file into an event and its text record."""
    ts1, bb1, ba1, aa1, ts21, evt1 = _fields(line101.rstrip("\n"), 6)
    _, bb2, ba2, aa2, ts22 = _fields(line102.rstrip("\n"), 5)
    _, bb3, ba3, aa3, ts23 = _fields(line103.rstrip("\n"), 5)

    a1, b1 = _planes(bb1, ba1, aa1)
    a2, b2 = _planes(bb2, ba2, aa2)
    a3, b3 = _planes(bb3, ba3, aa3)

    planes = (b1, a1, b2, a2, b3, a3)
    combined = ",".join(
        [ts1, *map(positions_to_string, planes), evt1, ts21, ts22, ts23, *(str(len(p)) for p in planes)]
    )
    event = Event(
        ts=_parse_int(ts1, _INT64),
        ts2_m101=_parse_int(ts21, _INT64),
        ts2_m102=_parse_int(ts22, _INT64),
        ts2_m103=_parse_int(ts23, _INT64),
        evt=_parse_int(evt1, _INT32),
        a1=a1,
        b1=b1,
        a2=a2,
        b2=b2,
        a3=a3,
        b3=b3,
    )
    return TriadLine(event, combined)


def process_date(prefix: str) -> tuple[str, str]:
    """Convert the triad at ``prefix`` and return the combined text and table paths.

    Raises ``OSError`` if a module file cannot be opened and ``ValueError`` if a
    timestamp or event number cannot be read.
    """
    paths = [prefix + suffix for suffix in RAW_SUFFIXES]
    txt_out = prefix + COMBINED_SUFFIX
    table_out = prefix + TABLE_SUFFIX

    try:
        handles = [open(p, encoding="utf-8", errors="replace") for p in paths]
    except OSError:
        print("Error abriendo alguno de los archivos: " + ", ".join(paths), file=sys.stderr)
        raise

    events = []
    try:
        with open(txt_out, "w", encoding="utf-8") as out:
            for l101, l102, l103 in zip(*handles):
                parsed = parse_triad_line(l101, l102, l103)
                out.write(parsed.combined + "\n")
                events.append(parsed.event)
    finally:
        for handle in handles:
            handle.close()

    EventTable(events).save(table_out)
    print(f"   ✔ Archivos creados: {txt_out} , {table_out}")
    return txt_out, table_out


def process_all(cfg: PathConfig) -> list[str]:
    """Convert every triad in the data directory in date order; return the prefixes done."""
    done = []
    for prefix in list_prefixes(cfg.data_dir):
        print(f">> Procesando fecha: {prefix} ...")
        try:
            process_date(prefix)
        except (OSError, ValueError):
            print("   ! Se omitió por error.", file=sys.stderr)
            continue
        done.append(prefix)
    return done