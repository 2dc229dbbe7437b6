"""Date extraction from file prefixes and interactive date selection."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import PurePath

_DATE_RE = re.compile(r"(\d{4})[_-]?(\d{2})[_-]?(\d{2})", re.ASCII)
_RANGE_RE = re.compile(r"^(\d{8})-(\d{8})$", re.ASCII)


def pretty_date(prefix: str) -> str:
    """Return the date in a prefix as ``YYYY_MM_DD``, or the file stem if none is found."""
    stem = PurePath(prefix).stem
    match = _DATE_RE.search(stem)
    if match:
        return "_".join(match.groups())
    return stem


def _digits(text: str) -> str:
    return "".join(ch for ch in text if ch.isascii() and ch.isdigit())


def digits_date(prefix: str) -> str:
    """Return only the digits of :func:`pretty_date`, normally ``YYYYMMDD``."""
    return _digits(pretty_date(prefix))


def _list_tokens(text: str) -> list[str]:
    tokens = text.split(",")
    if tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def select_date_prefixes(valid_prefixes: Sequence[str], selection: str) -> list[str]:
    """Pick prefixes by a selection string, keeping the order of ``valid_prefixes``.

    An empty selection keeps everything; ``YYYYMMDD-YYYYMMDD`` selects an
    inclusive range; otherwise a comma separated list of dates is expected.
    """
    if not selection:
        return list(valid_prefixes)

    selection = "".join(selection.split())
    wanted: set[str] = set()

    match = _RANGE_RE.match(selection)
    if match:
        start, end = match.groups()
        wanted = {p for p in valid_prefixes if start <= digits_date(p) <= end}
    else:
        for token in map(_digits, _list_tokens(selection)):
            found = next((p for p in valid_prefixes if digits_date(p) == token), None)
            if found is not None:
                wanted.add(found)

    return [p for p in valid_prefixes if p in wanted]


def prompt_date_prefixes(
    valid_prefixes: Sequence[str], input_fn: Callable[[str], str] = input
) -> list[str]:
    """Show the available dates, ask for a selection and apply it."""
    print("\nFechas disponibles:")
    for prefix in valid_prefixes:
        print(f"  • {pretty_date(prefix)}")
    try:
        answer = input_fn(
            "\nSeleccione fechas\n"
            "  ENTER                → Todas las fechas\n"
            "  lista  YYYYMMDD,...  → 20240921,20240923\n"
            "  rango  YYYYMMDD-YYYYMMDD → 20240921-20240925\n"
            "Selección: "
        )
    except EOFError:
        answer = ""
    return select_date_prefixes(valid_prefixes, answer)