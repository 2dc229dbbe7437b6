import pytest

from muonrate.events import Event, EventTable
from muonrate.loader import (
    extract_date,
    list_table_prefixes,
    load_tables_interactive,
    preview_table,
)
from muonrate.paths import PathConfig
from muonrate.processor import TABLE_SUFFIX


def make_event(evt, a1=(1,), b1=(2,)):
    return Event(ts=100 + evt, ts2_m101=10 * evt, ts2_m102=0, ts2_m103=0, evt=evt,
                 a1=a1, b1=b1, a2=(3,), b2=(4,), a3=(5,), b3=(6,))


def scripted(*answers):
    it = iter(answers)
    return lambda prompt: next(it)


@pytest.fixture
def data_dir(tmp_path):
    EventTable([make_event(1), make_event(2)]).save(tmp_path / f"20240921_{TABLE_SUFFIX}")
    EventTable([make_event(3)]).save(tmp_path / f"20240923_{TABLE_SUFFIX}")
    (tmp_path / "20240921_combined_output.txt").write_text("x\n")
    return tmp_path


def test_extract_date():
    assert extract_date("/data/20240921_") == "20240921"


def test_list_table_prefixes(data_dir):
    prefixes = list_table_prefixes(str(data_dir))
    assert prefixes == [str(data_dir / "20240921_"), str(data_dir / "20240923_")]


def test_load_single_individually(data_dir):
    cfg = PathConfig(str(data_dir), str(data_dir / "bad"), "r.txt")
    table = load_tables_interactive(cfg, scripted("20240923", "", "s", "n"))
    assert [e.evt for e in table] == [3]


def test_load_concatenated(data_dir):
    cfg = PathConfig(str(data_dir), str(data_dir / "bad"), "r.txt")
    table = load_tables_interactive(cfg, scripted("", "s", "n"))
    assert [e.evt for e in table] == [1, 2, 3]


def test_single_not_individual_still_loads(data_dir):
    cfg = PathConfig(str(data_dir), str(data_dir / "bad"), "r.txt")
    table = load_tables_interactive(cfg, scripted("20240921", "s", "n", "n"))
    assert [e.evt for e in table] == [1, 2]


def test_cancel_returns_none(data_dir):
    cfg = PathConfig(str(data_dir), str(data_dir / "bad"), "r.txt")
    assert load_tables_interactive(cfg, scripted("", "n")) is None


def test_empty_selection_returns_none(data_dir):
    cfg = PathConfig(str(data_dir), str(data_dir / "bad"), "r.txt")
    assert load_tables_interactive(cfg, scripted("19990101")) is None


def test_no_tables_returns_none(tmp_path):
    cfg = PathConfig(str(tmp_path), str(tmp_path / "bad"), "r.txt")
    assert load_tables_interactive(cfg, scripted()) is None


def test_preview_table_rows_and_header():
    table = EventTable([make_event(1), make_event(2, a1=())])
    text = preview_table(table)
    lines = text.splitlines()
    assert len(lines) == 3
    assert "ts2_m103" in lines[0] and "A1[0]" in lines[0]
    assert lines[1].startswith("*")