"""Locating processed event tables and loading the selected dates."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import PurePath

from .dates import prompt_date_prefixes
from .events import EventTable
from .paths import PathConfig
from .processor import TABLE_SUFFIX

_PREVIEW_COLUMNS = (
    "ts", "A1[0]", "B1[0]", "A2[0]", "B2[0]", "A3[0]", "B3[0]",
    "nA1", "nB1", "nA2", "nB2", "nA3", "nB3",
    "ts2_m101", "ts2_m102", "ts2_m103", "evt",
)


def _ask_char(input_fn: Callable[[str], str], prompt: str) -> str:
    try:
        answer = input_fn(prompt)
    except EOFError:
        return ""
    return answer.strip()[:1]


def extract_date(prefix: str) -> str:
    """The first eight characters of the prefix's file stem, normally ``YYYYMMDD``."""
    return PurePath(prefix).stem[:8]


def list_table_prefixes(data_dir: str) -> list[str]:
    """Sorted prefixes of every processed table in ``data_dir``."""
    return sorted(
        os.path.join(data_dir, name[: -len(TABLE_SUFFIX)])
        for name in os.listdir(data_dir)
        if name.endswith(TABLE_SUFFIX)
    )


def _cell(row: dict, column: str) -> str:
    if column.endswith("[0]"):
        values = row[column[:-3]]
        return str(values[0]) if values else ""
    return str(row[column])


def preview_table(table: EventTable) -> str:
    """Print and return a row-by-row overview of the main columns."""
    header = ["Row", *_PREVIEW_COLUMNS]
    rows = [
        [str(i), *(_cell(event.to_dict(), c) for c in _PREVIEW_COLUMNS)]
        for i, event in enumerate(table)
    ]
    widths = [max(len(r[k]) for r in [header, *rows]) for k in range(len(header))]

    def line(cells: list[str]) -> str:
        return "* " + " * ".join(c.rjust(w) for c, w in zip(cells, widths)) + " *"

    text = "\n".join(line(r) for r in [header, *rows])
    print("\nVista rápida del árbol:")
    print(text)
    return text


def load_tables_interactive(
    cfg: PathConfig, input_fn: Callable[[str], str] = input
) -> EventTable | None:
    """Let the user pick dates and load their tables, joined; ``None`` if nothing is loaded."""
    prefixes = list_table_prefixes(cfg.data_dir)
    if not prefixes:
        print(f"\nNo se encontraron tablas en {cfg.data_dir}")
        return None

    selected = prompt_date_prefixes(prefixes, input_fn)
    if not selected:
        print("No se seleccionó ninguna fecha.")
        return None

    go = _ask_char(
        input_fn, f"\nSe han seleccionado {len(selected)} fecha(s). ¿Deseas continuar? [S/n]: "
    )
    if go in ("n", "N"):
        print("Operación cancelada.")
        return None

    if len(selected) == 1:
        solo = _ask_char(input_fn, "Solo hay un archivo. ¿Abrirlo individualmente? [s/N]: ")
        if solo in ("s", "S"):
            fname = selected[0] + TABLE_SUFFIX
            try:
                table = EventTable.load(fname)
            except (OSError, ValueError):
                print(f"No se pudo abrir {fname}")
                return None
            print(f"\nArchivo cargado. Eventos: {len(table)}")
            if _ask_char(input_fn, "¿Ver Scan? [s/N]: ") in ("s", "S"):
                preview_table(table)
            return table

    tables = []
    for prefix in selected:
        fname = prefix + TABLE_SUFFIX
        try:
            tables.append(EventTable.load(fname))
        except (OSError, ValueError):
            print(f"No se pudo abrir {fname}")
    chain = EventTable.concat(tables)
    print(f"\n⇒ Concatenado {len(chain)} eventos de {len(selected)} archivo(s).")

    if _ask_char(input_fn, "¿Ver Scan del árbol concatenado? [s/N]: ") in ("s", "S"):
        preview_table(chain)
    return chain