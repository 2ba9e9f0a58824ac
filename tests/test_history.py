import pytest

from tinysh.history import History, HistoryEntry
from tinysh.rio import MAXLINE


@pytest.fixture
def history(tmp_path):
    return History(tmp_path / "history.txt")


def test_add_numbers_from_one(history):
    first = history.add("ls\n")
    second = history.add("pwd\n")
    assert first == HistoryEntry(1, "ls\n")
    assert second.number == 2
    assert len(history) == 2


def test_format_matches_history_output(history):
    history.add("ls\n")
    history.add("pwd\n")
    assert history.format() == "1  ls\n2  pwd\n"


def test_format_empty(history):
    assert history.format() == ""


def test_record_skips_repeated_history(history):
    history.record("history\n")
    assert history.record("history\n") is None
    assert [entry.command for entry in history] == ["history\n"]


def test_record_keeps_other_repeats(history):
    history.record("ls\n")
    entry = history.record("ls\n")
    assert entry == HistoryEntry(2, "ls\n")


def test_record_history_on_empty(history):
    entry = history.record("history\n")
    assert entry.number == 1
    assert len(history) == 1


def test_get_and_last(history):
    history.add("ls\n")
    history.add("pwd\n")
    assert history.get(1).command == "ls\n"
    assert history.last().command == "pwd\n"


@pytest.mark.parametrize("number", [0, 3, -1])
def test_get_missing_raises(history, number):
    history.add("ls\n")
    history.add("pwd\n")
    with pytest.raises(KeyError):
        history.get(number)


def test_last_on_empty_raises(history):
    with pytest.raises(KeyError):
        history.last()


def test_load_creates_missing_file(history):
    history.load()
    assert history.path.exists()
    assert len(history) == 0


def test_load_reads_lines(history):
    history.path.write_text("ls\ncd /tmp\n", encoding="utf-8")
    history.load()
    assert [entry.command for entry in history] == ["ls\n", "cd /tmp\n"]
    assert [entry.number for entry in history] == [1, 2]


def test_load_replaces_entries(history):
    history.add("old\n")
    history.path.write_text("new\n", encoding="utf-8")
    history.load()
    assert list(history) == [HistoryEntry(1, "new\n")]


def test_load_splits_long_lines(history):
    long_line = "a" * MAXLINE + "\n"
    history.path.write_text(long_line, encoding="utf-8")
    history.load()
    pieces = [entry.command for entry in history]
    assert "".join(pieces) == long_line
    assert all(len(piece) <= MAXLINE - 1 for piece in pieces)
    assert len(pieces) == 2


def test_save_omits_last_entry(history):
    history.add("ls\n")
    history.add("pwd\n")
    history.add("quit\n")
    history.save()
    assert history.path.read_text(encoding="utf-8") == "ls\npwd\n"


def test_save_empty_writes_nothing(history):
    history.save()
    assert history.path.read_text(encoding="utf-8") == ""


def test_save_load_round_trip(history, tmp_path):
    for command in ["ls -al\n", "echo 'a | b'\n", "cd ..\n", "exit\n"]:
        history.add(command)
    history.save()
    reloaded = History(tmp_path / "history.txt")
    reloaded.load()
    assert list(reloaded) == list(history)[:-1]
    assert reloaded.format() == "".join(
        f"{entry.number}  {entry.command}" for entry in list(history)[:-1]
    )