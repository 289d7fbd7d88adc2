import json
import logging
import sys

import pytest

import main


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if getattr(handler, "_deck_analyzer", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def deck_file(tmp_path, balanced_deck):
    path = tmp_path / "charizard.json"
    path.write_text(json.dumps(balanced_deck.model_dump(mode="json")), encoding="utf-8")
    return path


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["main.py", *args])
    main.main()


def test_json_output(monkeypatch, capsys, deck_file):
    run_cli(monkeypatch, str(deck_file), "--json")
    data = json.loads(capsys.readouterr().out)
    assert data["deck_name"] == "Charizard"
    assert data["score"] == 100
    assert data["summary"]["label"] == "Excellent"


def test_text_report(monkeypatch, capsys, deck_file):
    run_cli(monkeypatch, str(deck_file), "--seed", "1", "--format", "expanded")
    out = capsys.readouterr().out
    assert "SCORE: 100/100 (Excellent)" in out
    assert "Charmander: 4-3-3" in out
    assert "Analysis complete! 60 cards analyzed." in out


def test_missing_file_exits(monkeypatch, tmp_path):
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, str(tmp_path / "nope.txt"))
    assert exc.value.code == 1


def test_invalid_deck_exits(monkeypatch, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps([{"card": {"name": "Pidgey"}, "quantity": 4}]), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, str(path))
    assert exc.value.code == 1
