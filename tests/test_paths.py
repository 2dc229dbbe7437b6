import pytest

from muonrate.paths import PathConfig


def test_set_fields_are_not_asked(tmp_path):
    bad = tmp_path / "bad" / "nested"
    cfg = PathConfig(str(tmp_path), str(bad), str(tmp_path / "report.txt"))
    asked = []

    def fake_input(prompt):
        asked.append(prompt)
        return "x"

    result = cfg.make_interactive(fake_input)
    assert asked == []
    assert result == cfg
    assert bad.is_dir()


def test_blank_answers_default_to_current_directory():
    result = PathConfig().make_interactive(lambda prompt: "")
    assert result == PathConfig(".", ".", ".")


def test_answers_fill_missing_fields_in_order(tmp_path):
    answers = iter([str(tmp_path / "bad"), str(tmp_path / "rep.txt")])
    prompts = []

    def fake_input(prompt):
        prompts.append(prompt)
        return next(answers)

    result = PathConfig(data_dir=str(tmp_path)).make_interactive(fake_input)
    assert result.data_dir == str(tmp_path)
    assert result.bad_dir == str(tmp_path / "bad")
    assert result.report_file == str(tmp_path / "rep.txt")
    assert len(prompts) == 2
    assert prompts[0].endswith("(enter = .): ")
    assert (tmp_path / "bad").is_dir()


def test_end_of_input_counts_as_blank():
    def eof(prompt):
        raise EOFError

    result = PathConfig(data_dir="d", bad_dir=".").make_interactive(eof)
    assert result.report_file == "."


def test_config_is_immutable():
    cfg = PathConfig("a", "b", "c")
    with pytest.raises(AttributeError):
        cfg.data_dir = "z"
    assert cfg.data_dir == "a"
    assert cfg == PathConfig("a", "b", "c")