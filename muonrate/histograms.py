"""Hit-position histograms of the three detector planes."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np
from matplotlib.figure import Figure

from .cuts import Cut, parse_cut
from .events import HIT_COLUMNS, EventTable

ALLOWED_VARIABLES = ("A1", "B1", "A2", "B2", "A3", "B3")
MANDATORY_CUT = "nA1==1 && nB1==1 && nA2==1 && nB2==1 && nA3==1 && nB3==1"
PLANES = (
    ("A1", "B1", "B1 vs A1 (m101)"),
    ("A2", "B2", "B2 vs A2 (m102)"),
    ("A3", "B3", "B3 vs A3 (m103)"),
)
_EDGES = np.arange(1, 14)


def _ask(input_fn: Callable[[str], str], prompt: str) -> str:
    try:
        return input_fn(prompt)
    except EOFError:
        return ""


def _in_range(x: int) -> bool:
    return 1 <= x < 13


def _attr(variable: str) -> str:
    try:
        return HIT_COLUMNS[variable]
    except KeyError:
        raise ValueError(f"unknown variable {variable!r}") from None


def parse_variables(text: str) -> list[str]:
    """The allowed plane names in a comma separated list, whitespace ignored."""
    tokens = ("".join(tok.split()) for tok in text.split(","))
    return [tok for tok in tokens if tok in ALLOWED_VARIABLES]


def fill_1d(table: EventTable, variable: str) -> np.ndarray:
    """Counts of every hit of ``variable`` in twelve bars (index 0 is bar 1)."""
    attr = _attr(variable)
    values = [x for event in table for x in getattr(event, attr) if _in_range(x)]
    counts, _ = np.histogram(values, bins=_EDGES)
    return counts


def fill_2d(table: EventTable, a_name: str, b_name: str, cut: Cut | str | None = None) -> np.ndarray:
    """12×12 counts of the first hits, indexed ``[A - 1, B - 1]``, for events passing ``cut``."""
    a_attr, b_attr = _attr(a_name), _attr(b_name)
    selection = parse_cut(cut) if isinstance(cut, str) and cut else cut or None
    xs, ys = [], []
    for event in table:
        if selection is not None and not selection.evaluate(event.to_dict()):
            continue
        a, b = getattr(event, a_attr), getattr(event, b_attr)
        if a and b and _in_range(a[0]) and _in_range(b[0]):
            xs.append(a[0])
            ys.append(b[0])
    counts, _, _ = np.histogram2d(xs, ys, bins=[_EDGES, _EDGES])
    return counts


def plot_1d(table: EventTable, variables: Sequence[str], pdf_name: str = "hist1d.pdf") -> str:
    """Draw one bar histogram per variable into a PDF and return its name."""
    fig = Figure(figsize=(8, 3 * len(variables)))
    axes = fig.subplots(len(variables), 1, squeeze=False)[:, 0]
    centers = _EDGES[:-1] + 0.5
    for ax, variable in zip(axes, variables):
        counts = fill_1d(table, variable)
        ax.bar(centers, counts, width=0.8, color="tab:blue", edgecolor="navy")
        ax.set_title(f"h1_{variable}")
        ax.set_xlabel("Barra")
        ax.set_ylabel("Frecuencia (hits)")
        ax.set_xlim(1, 13)
        ax.set_xticks(centers, [str(b) for b in _EDGES[:-1]])
        top = counts.max() if counts.size else 0
        ax.set_ylim(0, top * 1.1 if top > 0 else 1)
        ax.grid(True)
    fig.tight_layout()
    fig.savefig(pdf_name, format="pdf")
    return pdf_name


def plot_2d(table: EventTable, pdf_name: str = "hist2d_planes.pdf") -> str:
    """Draw B versus A for each plane with the single-hit cut into a PDF and return its name."""
    fig = Figure(figsize=(12, 4))
    axes = fig.subplots(1, 3)
    cut = parse_cut(MANDATORY_CUT)
    for ax, (a_name, b_name, title) in zip(axes, PLANES):
        counts = fill_2d(table, a_name, b_name, cut)
        mesh = ax.pcolormesh(_EDGES, _EDGES, counts.T)
        fig.colorbar(mesh, ax=ax)
        ax.set_title(title)
        ax.set_xlabel("A")
        ax.set_ylabel("B")
    fig.tight_layout()
    fig.savefig(pdf_name, format="pdf")
    return pdf_name


def run_histograms(table: EventTable, input_fn: Callable[[str], str] = input) -> str | None:
    """Ask which histograms to draw; return the PDF written, if any."""
    mode = _ask(
        input_fn,
        "\n== Histogramas ==\n"
        "  1) 1D  (A1,B1,A2,B2,A3,B3)  – varias coma-separadas\n"
        "  2) 2D  (B1vsA1, B2vsA2, B3vsA3)  corte obligatorio\n"
        "  0) Volver\n"
        "Opción [0/1/2]: ",
    ).strip()[:1]
    if mode == "0":
        return None

    if mode == "1":
        variables = parse_variables(_ask(input_fn, "Variables (ej. A1,B2,A3): "))
        if not variables:
            print("Sin variables válidas.")
            return None
        pdf_name = _ask(input_fn, "Nombre PDF (ENTER hist1d.pdf): ") or "hist1d.pdf"
        plot_1d(table, variables, pdf_name)
        print(f"PDF guardado: {pdf_name}")
        return pdf_name

    if mode == "2":
        pdf_name = _ask(input_fn, "Nombre PDF (ENTER hist2d_planes.pdf): ") or "hist2d_planes.pdf"
        plot_2d(table, pdf_name)
        print(f"PDF guardado: {pdf_name}")
        return pdf_name

    print("Opción inválida.")
    return None