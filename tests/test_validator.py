import os

import pytest

from muonrate.paths import PathConfig
from muonrate.validator import (
    DateReport,
    is_valid_hex_byte,
    list_prefixes,
    move_bad_files,
    validate_directory,
    validate_triad,
    write_report,
)

MODULES = ("mate-m101.txt", "mate-m102.txt", "mate-m103.txt")


def _write_triad(prefix, rows):
    for module, lines in zip(MODULES, rows):
        with open(prefix + module, "w", encoding="utf-8") as fh:
            fh.write("".join(line + "\n" for line in lines))


def _good_rows(n=3):
    return [[f"{i},A,B,C,{i},{i + 1}" for i in range(n)] for _ in MODULES]


@pytest.fixture
def cfg(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    return PathConfig(
        data_dir=str(data), bad_dir=str(tmp_path / "bad"), report_file=str(tmp_path / "report.txt")
    )


@pytest.mark.parametrize("text", ["A", "ff", "0", "9c"])
def test_valid_hex_bytes(text):
    assert is_valid_hex_byte(text) is True


@pytest.mark.parametrize("text", ["", "100", "G1", " 1", "0x1"])
def test_invalid_hex_bytes(text):
    assert is_valid_hex_byte(text) is False


def test_list_prefixes_sorted(cfg):
    for name in ("20240923_", "20240921_"):
        _write_triad(os.path.join(cfg.data_dir, name), _good_rows())
    open(os.path.join(cfg.data_dir, "other.txt"), "w").close()
    assert list_prefixes(cfg.data_dir) == [
        os.path.join(cfg.data_dir, "20240921_"),
        os.path.join(cfg.data_dir, "20240923_"),
    ]


def test_validate_good_triad(cfg):
    prefix = os.path.join(cfg.data_dir, "20240921_")
    _write_triad(prefix, _good_rows())
    report = validate_triad(prefix)
    assert report == DateReport(prefix, True, [])


def test_validate_missing_file(cfg):
    prefix = os.path.join(cfg.data_dir, "20240921_")
    _write_triad(prefix, _good_rows())
    os.remove(prefix + "mate-m102.txt")
    report = validate_triad(prefix)
    assert report.valid is False
    assert report.issues == ["archivo faltante o ilegible: 20240921_mate-m102.txt"]


def test_validate_non_consecutive_events(cfg):
    prefix = os.path.join(cfg.data_dir, "20240921_")
    rows = _good_rows()
    rows[0][1] = "1,A,B,C,1,5"
    _write_triad(prefix, rows)
    report = validate_triad(prefix)
    assert report.issues == ["línea 2: eventos no consecutivos"]


def test_validate_bad_hex_and_columns(cfg):
    prefix = os.path.join(cfg.data_dir, "20240921_")
    rows = _good_rows()
    rows[1][0] = "0,ZZ,B,C,0"
    _write_triad(prefix, rows)
    report = validate_triad(prefix)
    assert report.issues == ["línea 1: columnas faltantes", "línea 1: hex inválido"]


def test_validate_short_middle_file(cfg):
    prefix = os.path.join(cfg.data_dir, "20240921_")
    rows = _good_rows()
    rows[1] = rows[1][:1]
    _write_triad(prefix, rows)
    report = validate_triad(prefix)
    assert report.issues == [
        "línea 2: número de líneas distinto entre archivos",
        "número de líneas distinto al final",
    ]


def test_validate_extra_lines_at_end(cfg):
    prefix = os.path.join(cfg.data_dir, "20240921_")
    rows = _good_rows()
    rows[2].append("9,A,B,C,9,9")
    _write_triad(prefix, rows)
    report = validate_triad(prefix)
    assert report.issues == ["número de líneas distinto al final"]


def test_write_report(tmp_path):
    path = str(tmp_path / "r.txt")
    write_report([DateReport("p1", True), DateReport("p2", False, ["x"])], path)
    with open(path, encoding="utf-8") as fh:
        assert fh.read() == "[OK]  p1\n[BAD] p2\n        - x\n"


def test_move_bad_files(cfg):
    good = os.path.join(cfg.data_dir, "20240921_")
    bad = os.path.join(cfg.data_dir, "20240922_")
    _write_triad(good, _good_rows())
    _write_triad(bad, _good_rows())
    moved = move_bad_files([DateReport(good, True), DateReport(bad, False)], cfg.bad_dir)
    assert sorted(os.path.basename(m) for m in moved) == sorted("20240922_" + m for m in MODULES)
    assert all(os.path.exists(m) for m in moved)
    assert not os.path.exists(bad + MODULES[0])
    assert os.path.exists(good + MODULES[0])


def test_validate_directory_moves_on_yes(cfg):
    good = os.path.join(cfg.data_dir, "20240921_")
    bad = os.path.join(cfg.data_dir, "20240922_")
    _write_triad(good, _good_rows())
    rows = _good_rows()
    rows[0][0] = "0,A,B,C,0,x"
    _write_triad(bad, rows)
    valid = validate_directory(cfg, True, lambda prompt: "s")
    assert valid == [good]
    assert os.path.exists(os.path.join(cfg.bad_dir, "20240922_mate-m101.txt"))
    with open(cfg.report_file, encoding="utf-8") as fh:
        report = fh.read()
    assert f"[OK]  {good}\n" in report
    assert f"[BAD] {bad}\n" in report


def test_validate_directory_keeps_files_on_no(cfg):
    bad = os.path.join(cfg.data_dir, "20240922_")
    _write_triad(bad, [["0,A,B,C,0"], ["0,A,B,C,0"], ["0,A,B,C,0"]])
    assert validate_directory(cfg, True, lambda prompt: "n") == []
    assert os.path.exists(bad + MODULES[0])


def test_validate_directory_without_prompt(cfg):
    bad = os.path.join(cfg.data_dir, "20240922_")
    _write_triad(bad, [["0,A,B,C,0"], ["0,A,B,C,0"], ["0,A,B,C,0"]])

    def fail(prompt):
        raise AssertionError("should not ask")

    assert validate_directory(cfg, False, fail) == []
    assert os.path.exists(bad + MODULES[0])