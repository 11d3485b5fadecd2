import json
import sys

import pytest

from artmarket.cli import run_checklist, run_simulator, run_validate


def test_validate_accepts_default_rules(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["artmarket-validate"])
    run_validate()
    assert "Rules are valid" in capsys.readouterr().out


def test_validate_rejects_broken_file(monkeypatch, capsys, tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"maxPlayers": 9}), encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["artmarket-validate", "--rules", str(path)])
    with pytest.raises(SystemExit) as info:
        run_validate()
    assert info.value.code == 1
    assert "cannot deal" in capsys.readouterr().out


def test_checklist_exits_on_warnings(monkeypatch, capsys, tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"payouts": [10, 20, 30]}), encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["artmarket-checklist", "--rules", str(path)])
    with pytest.raises(SystemExit):
        run_checklist()
    assert "descending" in capsys.readouterr().out


def test_simulator_prints_results(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["artmarket-simulate", "--players", "3", "--seed", "4"])
    run_simulator()
    output = capsys.readouterr().out
    assert "Game 1" in output
    assert "bot-1" in output


@pytest.mark.parametrize("entry_point", [run_checklist, run_simulator])
def test_malformed_rules_file_exits_cleanly(entry_point, monkeypatch, capsys, tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["artmarket", "--rules", str(path)])
    with pytest.raises(SystemExit) as info:
        entry_point()
    assert info.value.code == 1
    assert "Cannot load rules" in capsys.readouterr().out


def test_simulator_rejects_bad_payout_mode_from_env(monkeypatch, capsys):
    monkeypatch.setenv("ARTMARKET_PAYOUT_MODE", "bonus")
    monkeypatch.setattr(sys, "argv", ["artmarket-simulate"])
    with pytest.raises(SystemExit) as info:
        run_simulator()
    assert info.value.code == 1
    assert "Cannot load rules" in capsys.readouterr().out
