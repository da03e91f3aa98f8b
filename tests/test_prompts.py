from pathlib import Path

import pytest

from ferium.prompts import PromptCancelled, confirm, multi_select, pick_folder, select, text


def feed(monkeypatch, *answers):
    remaining = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


def test_select_number(monkeypatch):
    feed(monkeypatch, "2")
    assert select("Pick", ["a", "b", "c"]) == 1


def test_select_default(monkeypatch):
    feed(monkeypatch, "")
    assert select("Pick", ["a", "b", "c"], 2) == 2


def test_select_retries_invalid(monkeypatch):
    feed(monkeypatch, "9", "x", "3")
    assert select("Pick", ["a", "b", "c"]) == 2


def test_select_cancel(monkeypatch):
    feed(monkeypatch)
    with pytest.raises(PromptCancelled):
        select("Pick", ["a"])


def test_select_empty_options(monkeypatch):
    feed(monkeypatch, "1")
    with pytest.raises(PromptCancelled):
        select("Pick", [])


def test_multi_select(monkeypatch):
    feed(monkeypatch, "3, 1 3")
    assert multi_select("Pick", ["a", "b", "c"]) == [0, 2]


def test_multi_select_defaults_and_none(monkeypatch):
    feed(monkeypatch, "", "none")
    assert multi_select("Pick", ["a", "b", "c"], [2, 1]) == [1, 2]
    assert multi_select("Pick", ["a", "b", "c"], [2, 1]) == []


def test_multi_select_retries(monkeypatch):
    feed(monkeypatch, "0", "2")
    assert multi_select("Pick", ["a", "b"]) == [1]


@pytest.mark.parametrize(
    "answer, default, expected",
    [("y", False, True), ("No", True, False), ("", True, True), ("", False, False)],
)
def test_confirm(monkeypatch, answer, default, expected):
    feed(monkeypatch, answer)
    assert confirm("Sure?", default) is expected


def test_confirm_cancel(monkeypatch):
    feed(monkeypatch)
    with pytest.raises(PromptCancelled):
        confirm("Sure?")


def test_text_validator_loops(monkeypatch):
    feed(monkeypatch, "taken", "fresh")
    result = text("Name", validator=lambda s: "exists" if s == "taken" else None)
    assert result == "fresh"


def test_text_default(monkeypatch):
    feed(monkeypatch, "")
    assert text("Name", default="Profile") == "Profile"


def test_pick_folder(monkeypatch, tmp_path):
    feed(monkeypatch, "", str(tmp_path / "other"))
    assert pick_folder(tmp_path, "Pick", "Output Directory") == tmp_path
    assert pick_folder(tmp_path, "Pick", "Output Directory") == tmp_path / "other"


def test_pick_folder_cancel(monkeypatch, tmp_path):
    feed(monkeypatch)
    assert pick_folder(tmp_path, "Pick", "Output Directory") is None


def test_pick_folder_expands_home(monkeypatch):
    feed(monkeypatch, "~/mods")
    assert pick_folder("/", "Pick", "Output Directory") == Path.home() / "mods"