"""Exponential fit of the time between consecutive clean events."""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from matplotlib.figure import Figure
from scipy.optimize import curve_fit

from .events import HIT_COLUMNS, EventTable

TICK_SECONDS = 1e-7
MIN_ENTRIES = 10


@dataclass(frozen=True)
class FitResult:
    """Parameters of ``exp(a - lambda * t)`` and the derived mean period."""

    a: float = 0.0
    err_a: float = 0.0
    rate: float = 0.0
    err_rate: float = 0.0
    period: float = 0.0
    err_period: float = 0.0


def best_candidate(candidates: Iterable[int], previous: int) -> int:
    """Smallest positive candidate not before ``previous``; ``-1`` if there is none."""
    eligible = [c for c in candidates if c > 0 and (previous < 0 or c >= previous)]
    return min(eligible, default=-1)


def _single_hit(event) -> bool:
    return all(len(getattr(event, attr)) == 1 for attr in HIT_COLUMNS.values())


def collect_deltas(table: EventTable, hist_range_s: float = 2.0) -> list[float]:
    """Seconds between consecutive single-hit events, kept when inside ``(0, hist_range_s)``."""
    deltas = []
    prev_ts = -1
    for event in table:
        if not _single_hit(event):
            continue
        p1 = event.ts2_m101
        if p1 > 0 and (prev_ts < 0 or p1 >= prev_ts):
            ts = p1
        else:
            ts = best_candidate((event.ts2_m102, event.ts2_m103), prev_ts)
        if ts < 0:
            continue
        if prev_ts > 0:
            dt = (ts - prev_ts) * TICK_SECONDS
            if 0 < dt < hist_range_s:
                deltas.append(dt)
        prev_ts = ts
    return deltas


def _expo(x, p0, p1):
    return np.exp(p0 + p1 * x)


def _histogram(deltas: Sequence[float], hist_range_s: float, n_bins: int):
    counts, edges = np.histogram(deltas, bins=n_bins, range=(0.0, hist_range_s))
    centers = (edges[:-1] + edges[1:]) / 2
    return counts, edges, centers


def fit_exponential(
    deltas: Sequence[float], hist_range_s: float = 2.0, n_bins: int = 20
) -> FitResult:
    """Fit ``exp(p0 + p1 * t)`` to the binned deltas by weighted least squares.

    Raises ``ValueError`` when there are fewer than ten deltas or too few
    filled bins to fit.
    """
    inside = [d for d in deltas if 0 <= d < hist_range_s]
    if len(inside) < MIN_ENTRIES:
        raise ValueError(f"Insuficientes eventos ({len(inside)}) para ajustar el rate.")
    counts, _, centers = _histogram(inside, hist_range_s, n_bins)
    mask = counts > 0
    if mask.sum() < 2:
        raise ValueError("too few filled bins to fit")
    x = centers[mask]
    y = counts[mask].astype(float)
    slope, intercept = np.polyfit(x, np.log(y), 1)
    params, cov = curve_fit(
        _expo, x, y, p0=(intercept, slope), sigma=np.sqrt(y), absolute_sigma=True, maxfev=10000
    )
    errors = np.sqrt(np.abs(np.diag(cov)))
    a, b = float(params[0]), float(params[1])
    err_a, err_b = float(errors[0]), float(errors[1])
    rate = -b
    period = 1.0 / rate if rate else math.inf
    err_period = err_b / (rate * rate) if rate else math.inf
    return FitResult(a, err_a, rate, err_b, period, err_period)


def _plot(deltas, hist_range_s, n_bins, fit: FitResult, pdf_name: str) -> None:
    counts, edges, _ = _histogram(deltas, hist_range_s, n_bins)
    fig = Figure(figsize=(8, 6))
    ax = fig.subplots()
    ax.stairs(counts, edges, fill=True, color="tab:blue", alpha=0.6)
    xs = np.linspace(0.0, hist_range_s, 400)
    ax.plot(xs, _expo(xs, fit.a, -fit.rate), color="red")
    top = counts.max() if counts.size else 0
    ax.set_ylim(0, top * 1.1 if top > 0 else 1)
    ax.set_title("Distribucion Δt")
    ax.set_xlabel("Δt (s)")
    ax.set_ylabel("Conteos")
    ax.text(
        0.60,
        0.83,
        f"A = {fit.a:.2f} ± {fit.err_a:.2f}\n"
        f"λ = {fit.rate:.4f} ± {fit.err_rate:.4f} Hz\n"
        f"μ = 1/λ = {fit.period:.4f} ± {fit.err_period:.4f} s",
        transform=ax.transAxes,
        va="top",
        bbox={"facecolor": "white", "edgecolor": "black"},
    )
    fig.savefig(pdf_name, format="pdf")


def run_rate_fit(
    table: EventTable,
    hist_range_s: float = 2.0,
    n_bins: int = 20,
    pdf_name: str = "rate_fit.pdf",
) -> FitResult:
    """Fit the event rate, draw it into a PDF and print the parameters.

    When there are too few events a warning is printed and a zero result returned.
    """
    deltas = collect_deltas(table, hist_range_s)
    try:
        fit = fit_exponential(deltas, hist_range_s, n_bins)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return FitResult()

    _plot(deltas, hist_range_s, n_bins, fit, pdf_name)
    print(f"Grafico guardado en {pdf_name}")
    print(
        "\nParámetros del ajuste exponencial\n"
        "----------------------------------\n"
        f"A               = {fit.a:g} ± {fit.err_a:g}\n"
        f"λ (rate)   [Hz] = {fit.rate:g} ± {fit.err_rate:g}\n"
        f"μ (periodo) [s] = {fit.period:g} ± {fit.err_period:g}"
    )
    return fit