"""Interactive menu tying together validation, processing and analysis."""

from __future__ import annotations

import sys
import time
from collections.abc import Sequence

from .events import EventTable
from .filtering import run_interactive
from .histograms import run_histograms
from .loader import load_tables_interactive
from .dates import prompt_date_prefixes
from .paths import PathConfig
from .processor import TABLE_SUFFIX, process_date
from .ratefit import run_rate_fit
from .validator import validate_directory

_EXTENSION = TABLE_SUFFIX[len("output"):]


def _read(prompt: str) -> str:
    return input(prompt)


def _ask_char(prompt: str) -> str:
    try:
        return _read(prompt).strip()[:1]
    except EOFError:
        return ""


def _yes(prompt: str) -> bool:
    return _ask_char(prompt) in ("s", "S")


def save_concatenated(table: EventTable) -> str | None:
    """Write the whole table into ``concatenated_<time>`` and return the file name."""
    name = f"concatenated_{int(time.time())}{_EXTENSION}"
    try:
        table.save(name)
    except OSError:
        print(f"No se pudo crear '{name}'.", file=sys.stderr)
        return None
    print(f"Árbol concatenado guardado en '{name}'  ({len(table)} eventos).")
    return name


def _process_menu(cfg: PathConfig) -> None:
    print("\n=== VALIDACIÓN DE TRIADAS (.txt) ===")
    valid = validate_directory(cfg, True, _read)
    if not valid:
        print("No hay fechas válidas.")
        return
    selected = prompt_date_prefixes(valid, _read)
    if not selected:
        print("No se seleccionó ninguna fecha.")
        return
    print("\n=== CONVERSIÓN A TABLA ===")
    for prefix in selected:
        try:
            process_date(prefix)
        except (OSError, ValueError) as exc:
            print(f"   ! {prefix}: {exc}", file=sys.stderr)
    print("Procesamiento finalizado.")


def _analysis_menu(cfg: PathConfig) -> None:
    table = load_tables_interactive(cfg, _read)
    if table is None:
        print("No se cargó ningún árbol.")
        return
    if _yes("¿Guardar árbol concatenado como un único archivo? [s/N]: "):
        save_concatenated(table)
    if _yes("¿Aplicar filtros (DataFilter)? [s/N]: "):
        table = run_interactive(table, _read).table
    while _yes("¿Generar histogramas? [s/N]: "):
        run_histograms(table, _read)
    if _yes("¿Calcular ajuste exponencial del rate? [s/N]: "):
        run_rate_fit(table)
    print("Operación con tablas terminada.")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the menu; optional arguments are data dir, bad dir and report file."""
    args = list(sys.argv[1:] if argv is None else argv)
    names = ("data_dir", "bad_dir", "report_file")
    cfg = PathConfig(**dict(zip(names, args[:3]))).make_interactive(_read)

    while True:
        try:
            opt = _read(
                "\n=============== MENÚ ===============\n"
                "  0) Salir\n"
                "  1) Procesar .txt  →  tabla\n"
                "  2) Cargar / concatenar tablas  (filtros / histos / rate)\n"
                "Seleccione [0/1/2]: "
            ).strip()[:1]
        except EOFError:
            opt = "0"

        if opt == "0":
            print("Hasta luego.")
            return 0
        if opt == "1":
            _process_menu(cfg)
        elif opt == "2":
            _analysis_menu(cfg)
        else:
            print("Opción inválida.")


if __name__ == "__main__":
    sys.exit(main())