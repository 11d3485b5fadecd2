"""Automated checks to highlight balancing issues in table rules."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import RulesConfig
from ..validators import validate_rules


@dataclass(slots=True)
class ChecklistIssue:
    severity: str
    message: str


def run_checklist(rules: RulesConfig) -> list[ChecklistIssue]:
    issues = [ChecklistIssue("error", message) for message in validate_rules(rules)]
    if issues:
        return issues

    if rules.round_end_threshold > rules.cards_per_artist:
        issues.append(
            ChecklistIssue(
                "warning",
                "No artist can reach the round-end threshold; rounds only end when hands run out.",
            )
        )

    if list(rules.payouts) != sorted(rules.payouts, reverse=True):
        issues.append(
            ChecklistIssue("warning", "Payouts are not in descending order; lower ranks pay more.")
        )

    if len(rules.payouts) >= len(rules.artists):
        issues.append(
            ChecklistIssue("warning", "Every artist gets a payout; popularity stops mattering.")
        )

    remaining = rules.deck_size - rules.min_players * rules.cards_per_player
    later_rounds = rules.max_rounds - 1
    if later_rounds > 0 and remaining < rules.min_players * rules.cards_per_round * later_rounds:
        issues.append(
            ChecklistIssue(
                "warning",
                f"The deck runs short before round {rules.max_rounds}; later rounds get smaller deals.",
            )
        )

    if rules.starting_money <= max(rules.payouts, default=0):
        issues.append(
            ChecklistIssue("warning", "Starting money is lower than the top payout; early bids stay tiny.")
        )
    return issues
