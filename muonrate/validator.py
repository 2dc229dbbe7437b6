"""Consistency checks on raw triads of module files."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .paths import PathConfig

RAW_SUFFIXES = ("mate-m101.txt", "mate-m102.txt", "mate-m103.txt")
EXPECTED_COLUMNS = 6

_HEX_BYTE_RE = re.compile(r"[0-9A-Fa-f]{1,2}", re.ASCII)
_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)


@dataclass
class DateReport:
    """Outcome of validating the triad of one date."""

    prefix: str
    valid: bool = False
    issues: list[str] = field(default_factory=list)


def is_valid_hex_byte(text: str) -> bool:
    """True for one or two hexadecimal digits."""
    return _HEX_BYTE_RE.fullmatch(text) is not None


def list_prefixes(data_dir: str) -> list[str]:
    """Sorted prefixes of every ``*mate-m101.txt`` entry in ``data_dir``."""
    tag = RAW_SUFFIXES[0]
    return sorted(
        os.path.join(data_dir, name[: -len(tag)]) for name in os.listdir(data_dir) if name.endswith(tag)
    )


def _readable(path: str) -> bool:
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def _split(line: str) -> list[str]:
    parts = line.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts


def _event_number(text: str) -> int:
    match = _INT_RE.match(text)
    if not match:
        raise ValueError(text)
    value = int(match.group(1))
    if not -(2**31) <= value < 2**31:
        raise ValueError(text)
    return value


def _column(values: list[str], index: int) -> str:
    return values[index] if index < len(values) else ""


def validate_triad(prefix: str) -> DateReport:
    """Check that the three files exist and agree line by line."""
    report = DateReport(prefix)
    files = [prefix + suffix for suffix in RAW_SUFFIXES]
    report.issues.extend(
        f"archivo faltante o ilegible: {os.path.basename(f)}" for f in files if not _readable(f)
    )
    if report.issues:
        return report

    with open(files[0], encoding="utf-8", errors="replace") as f1, open(
        files[1], encoding="utf-8", errors="replace"
    ) as f2, open(files[2], encoding="utf-8", errors="replace") as f3:
        line_no = 0
        prev_evt: int | None = None
        while l1 := f1.readline():
            line_no += 1
            l2 = f2.readline()
            l3 = f3.readline() if l2 else ""
            if not l2 or not l3:
                report.issues.append(f"línea {line_no}: número de líneas distinto entre archivos")
                break

            rows = [_split(line.rstrip("\n")) for line in (l1, l2, l3)]
            bad_cols = any(len(row) != EXPECTED_COLUMNS for row in rows)
            bad_hex = not all(is_valid_hex_byte(_column(row, i)) for row in rows for i in (1, 2, 3))
            bad_evt = False
            try:
                evt = _event_number(_column(rows[0], 5))
            except ValueError:
                bad_evt = True
            else:
                if prev_evt is not None and evt != prev_evt + 1:
                    bad_evt = True
                prev_evt = evt

            if bad_cols:
                report.issues.append(f"línea {line_no}: columnas faltantes")
            if bad_hex:
                report.issues.append(f"línea {line_no}: hex inválido")
            if bad_evt:
                report.issues.append(f"línea {line_no}: eventos no consecutivos")

        if f2.readline() or f3.readline():
            report.issues.append("número de líneas distinto al final")

    report.valid = not report.issues
    return report


def write_report(reports: Iterable[DateReport], path: str) -> None:
    """Write a plain-text report of the validation results."""
    with open(path, "w", encoding="utf-8") as out:
        for report in reports:
            out.write(("[OK]  " if report.valid else "[BAD] ") + report.prefix + "\n")
            for issue in report.issues:
                out.write(f"        - {issue}\n")
    print(f"Informe guardado en '{path}'.")


def move_bad_files(reports: Iterable[DateReport], bad_dir: str) -> list[str]:
    """Move the raw files of every invalid date into ``bad_dir``; return the new paths."""
    os.makedirs(bad_dir, exist_ok=True)
    moved = []
    for report in reports:
        if report.valid:
            continue
        for suffix in RAW_SUFFIXES:
            source = report.prefix + suffix
            if os.path.exists(source):
                target = os.path.join(bad_dir, os.path.basename(source))
                os.replace(source, target)
                moved.append(target)
    print(f"Archivos movidos a '{bad_dir}'.")
    return moved


def validate_directory(
    cfg: PathConfig, prompt_move: bool = True, input_fn: Callable[[str], str] = input
) -> list[str]:
    """Validate every triad in the data directory, write the report and return the valid prefixes."""
    reports = [validate_triad(prefix) for prefix in list_prefixes(cfg.data_dir)]
    write_report(reports, cfg.report_file)

    if prompt_move and any(not r.valid for r in reports):
        try:
            answer = input_fn(f"¿Mover fechas problemáticas a '{cfg.bad_dir}'? [s/N]: ")
        except EOFError:
            answer = ""
        if answer.strip()[:1] in ("s", "S"):
            move_bad_files(reports, cfg.bad_dir)

    return [r.prefix for r in reports if r.valid]