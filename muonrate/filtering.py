"""Interactive building of selection cuts and their application to a table."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from .cuts import Cut, CutError, parse_cut
from .events import HIT_COLUMNS, SCALAR_COLUMNS, EventTable
from .processor import TABLE_SUFFIX

_COLUMNS = frozenset((*SCALAR_COLUMNS, *HIT_COLUMNS, *("n" + c for c in HIT_COLUMNS)))


@dataclass
class FilterResult:
    """The table after filtering, the cut applied and the file written, if any."""

    table: EventTable
    cut: Cut | None = None
    path: str | None = None


def _ask(input_fn: Callable[[str], str], prompt: str) -> str:
    try:
        return input_fn(prompt)
    except EOFError:
        return ""


def _valid_cut(text: str) -> Cut | None:
    try:
        cut = parse_cut(text)
    except CutError:
        return None
    return cut if cut.variables <= _COLUMNS else None


def run_interactive(table: EventTable, input_fn: Callable[[str], str] = input) -> FilterResult:
    """Ask for cuts, combine them, then filter in memory or into a new table file."""
    global_cut: Cut | None = None

    while True:
        print(f"\nCorte actual: {global_cut.text if global_cut else '(ninguno)'}")
        text = _ask(input_fn, "Ingrese nuevo corte (ENTER para continuar): ")
        if not text:
            break
        cut = _valid_cut(text)
        if cut is None:
            print("  ✖ Corte inválido. Revise la sintaxis.")
            continue
        if global_cut is not None:
            op = _ask(input_fn, "Combinar con 1) AND  o  2) OR  [1/2]: ").strip()[:1]
            global_cut = global_cut.combine(cut, use_or=op == "2")
        else:
            global_cut = cut
        print(f"   → Pasan {table.count(global_cut)} / {len(table)} eventos.")

    if global_cut is None:
        print("No se aplicó ningún filtro.")
        return FilterResult(table)

    mode = _ask(
        input_fn,
        "\nOpciones de salida:\n"
        "  1) Aplicar selección en memoria (rápido)\n"
        "  2) Crear nuevo archivo con la tabla filtrada\n"
        "Seleccione [1/2]: ",
    ).strip()[:1]

    filtered = table.filter(global_cut)
    if mode == "1":
        print(f"Selección aplicada ({len(filtered)} eventos seleccionados).")
        return FilterResult(filtered, global_cut)

    fname = f"filtered_{int(time.time())}{TABLE_SUFFIX[len('output'):]}"
    try:
        filtered.save(fname)
    except OSError:
        print(f"No se pudo crear '{fname}'.")
        return FilterResult(table)
    print(f"Tabla filtrada guardada en '{fname}'  ({len(filtered)} eventos).")
    return FilterResult(filtered, global_cut, fname)