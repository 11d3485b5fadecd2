"""Rules validation helpers."""

from __future__ import annotations

from .config import PAYOUT_MODES, RulesConfig


def validate_rules(rules: RulesConfig) -> list[str]:
    """Return a list of blocking problems with ``rules``; empty when playable."""
    errors: list[str] = []

    if not rules.artists:
        errors.append("At least one artist must be configured.")
    elif len(set(rules.artists)) != len(rules.artists):
        errors.append("Artist names must be unique.")

    if rules.cards_per_artist <= 0:
        errors.append("'cards_per_artist' must be positive.")
    if rules.cards_per_player <= 0:
        errors.append("'cards_per_player' must be positive.")
    if rules.cards_per_round < 0:
        errors.append("'cards_per_round' must not be negative.")
    if rules.starting_money < 0:
        errors.append("'starting_money' must not be negative.")

    if rules.min_players < 2:
        errors.append("'min_players' must be at least 2.")
    if rules.max_players < rules.min_players:
        errors.append("'max_players' must not be lower than 'min_players'.")
    elif rules.max_players * rules.cards_per_player > rules.deck_size:
        errors.append(
            f"Deck of {rules.deck_size} cards cannot deal {rules.cards_per_player} cards "
            f"to {rules.max_players} players."
        )

    if rules.round_end_threshold <= 0:
        errors.append("'round_end_threshold' must be positive.")
    if rules.max_rounds <= 0:
        errors.append("'max_rounds' must be positive.")

    if not rules.payouts:
        errors.append("At least one payout value is required.")
    elif any(value < 0 for value in rules.payouts):
        errors.append("Payout values must not be negative.")

    if rules.payout_mode not in PAYOUT_MODES:
        errors.append(f"Unsupported payout mode '{rules.payout_mode}'.")
    return errors
