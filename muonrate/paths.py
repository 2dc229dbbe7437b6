"""Directory and report locations used by the processing pipeline."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from dataclasses import dataclass

_PROMPTS = (
    ("data_dir", "Directorio con datos (.txt / .root)"),
    ("bad_dir", "Directorio para archivos problemáticos"),
    ("report_file", "Nombre del archivo de reporte"),
)


@dataclass(frozen=True)
class PathConfig:
    """Where the raw data lives, where bad files go and where the report is written."""

    data_dir: str = ""
    bad_dir: str = ""
    report_file: str = ""

    def make_interactive(self, input_fn: Callable[[str], str] = input) -> PathConfig:
        """Ask for every empty setting (blank answer means ".") and create the bad directory."""
        answers = {}
        for name, message in _PROMPTS:
            if getattr(self, name):
                continue
            try:
                answer = input_fn(f"{message} (enter = .): ")
            except EOFError:
                answer = ""
            answers[name] = answer or "."
        cfg = dataclasses.replace(self, **answers)
        if cfg.bad_dir:
            os.makedirs(cfg.bad_dir, exist_ok=True)
        return cfg