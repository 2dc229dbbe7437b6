from muonrate.events import Event, EventTable
from muonrate.filtering import run_interactive


def make_event(evt, a1=(1,)):
    return Event(ts=evt, ts2_m101=evt, ts2_m102=0, ts2_m103=0, evt=evt,
                 a1=a1, b1=(2,), a2=(3,), b2=(4,), a3=(5,), b3=(6,))


def scripted(*answers):
    it = iter(answers)
    return lambda prompt: next(it)


def sample():
    return EventTable([make_event(1), make_event(2, a1=(1, 7)), make_event(3), make_event(4)])


def test_no_cut_returns_original():
    table = sample()
    result = run_interactive(table, scripted(""))
    assert result.table is table
    assert result.cut is None and result.path is None


def test_invalid_then_valid_cut_in_memory():
    table = sample()
    result = run_interactive(table, scripted("evt >", "nA1==1", "", "1"))
    assert [e.evt for e in result.table] == [1, 3, 4]
    assert len(result.table) == table.count("nA1==1")
    assert result.path is None


def test_unknown_variable_is_rejected():
    table = sample()
    result = run_interactive(table, scripted("foo>1", ""))
    assert result.cut is None
    assert result.table is table


def test_or_combination():
    result = run_interactive(sample(), scripted("evt==1", "evt==2", "2", "", "1"))
    assert str(result.cut) == "(evt==1)||(evt==2)"
    assert [e.evt for e in result.table] == [1, 2]


def test_and_combination():
    result = run_interactive(sample(), scripted("evt>1", "evt<4", "1", "", "1"))
    assert str(result.cut) == "(evt>1)&&(evt<4)"
    assert [e.evt for e in result.table] == [2, 3]


def test_file_output_round_trip(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = run_interactive(sample(), scripted("evt>=3", "", "2"))
    assert result.path.startswith("filtered_")
    assert (tmp_path / result.path).exists()
    assert EventTable.load(tmp_path / result.path) == result.table
    assert [e.evt for e in result.table] == [3, 4]