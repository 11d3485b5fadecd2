from artmarket import RulesConfig
from artmarket.diagnostics import run_checklist
from artmarket.validators import validate_rules


def test_default_rules_are_valid():
    assert validate_rules(RulesConfig()) == []
    assert run_checklist(RulesConfig()) == []


def test_validate_rules_detects_small_deck():
    rules = RulesConfig(cards_per_artist=10)
    issues = validate_rules(rules)
    assert "Deck of 50 cards cannot deal 10 cards to 6 players." in issues


def test_validate_rules_collects_every_problem():
    rules = RulesConfig(
        artists=("Karl", "Karl"),
        min_players=1,
        round_end_threshold=0,
        payouts=(30, -5),
        payout_mode="weekly",
    )
    issues = validate_rules(rules)
    assert "Artist names must be unique." in issues
    assert "'min_players' must be at least 2." in issues
    assert "'round_end_threshold' must be positive." in issues
    assert "Payout values must not be negative." in issues
    assert "Unsupported payout mode 'weekly'." in issues


def test_checklist_reports_errors_first():
    issues = run_checklist(RulesConfig(artists=()))
    assert [issue.severity for issue in issues] == ["error"]


def test_checklist_warns_about_balance():
    rules = RulesConfig(
        artists=("Karl", "Yoko", "Krypto"),
        cards_per_artist=20,
        max_players=5,
        round_end_threshold=25,
        payouts=(10, 20, 30),
        starting_money=20,
    )
    messages = [issue.message for issue in run_checklist(rules)]
    assert all(issue.severity == "warning" for issue in run_checklist(rules))
    assert any("round-end threshold" in message for message in messages)
    assert any("descending" in message for message in messages)
    assert any("Every artist gets a payout" in message for message in messages)
    assert any("Starting money" in message for message in messages)
