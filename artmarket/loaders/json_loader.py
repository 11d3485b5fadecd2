"""Load table rules from JSON definitions.

Example document::

    {
        "artists": ["Krypto", "Yoko", "Karl"],
        "cardsPerArtist": 12,
        "cardsPerPlayer": 10,
        "roundEndThreshold": 5,
        "maxRounds": 4,
        "payouts": [30, 20, 10],
        "payoutMode": "round"
    }

Omitted keys keep their :class:`RulesConfig` defaults.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from ..config import PAYOUT_MODES, RulesConfig
from ..validators import validate_rules

_INT_FIELDS = {
    "cardsPerArtist": "cards_per_artist",
    "cardsPerPlayer": "cards_per_player",
    "cardsPerRound": "cards_per_round",
    "startingMoney": "starting_money",
    "minPlayers": "min_players",
    "maxPlayers": "max_players",
    "roundEndThreshold": "round_end_threshold",
    "maxRounds": "max_rounds",
}


def load_rules_from_json(path: str | Path) -> RulesConfig:
    """Read, validate and parse a rules file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_rules_dict(data)


def parse_rules_dict(data: dict[str, Any]) -> RulesConfig:
    """Parse a decoded JSON dict into :class:`RulesConfig`."""
    errors = validate_rules_dict(data)
    if errors:
        raise ValueError(_format_errors("Rules validation failed", errors))
    return _build_rules(data)


def validate_rules_file(path: str | Path) -> list[str]:
    """Validate rules JSON file and return a list of errors."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        return [f"Invalid JSON: {exc}"]
    return validate_rules_dict(data)


def validate_rules_dict(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Rules must be a JSON object."]

    artists = data.get("artists")
    if artists is not None:
        if not isinstance(artists, list) or not artists:
            errors.append("'artists' must be a non-empty array.")
        else:
            for idx, name in enumerate(artists, start=1):
                if not isinstance(name, str) or not name.strip():
                    errors.append(f"Artist #{idx} must be a non-empty string.")

    for key in _INT_FIELDS:
        if key in data and (not isinstance(data[key], int) or isinstance(data[key], bool)):
            errors.append(f"'{key}' must be an integer.")

    payouts = data.get("payouts")
    if payouts is not None:
        if not isinstance(payouts, list) or not payouts:
            errors.append("'payouts' must be a non-empty array.")
        elif any(not isinstance(value, int) or isinstance(value, bool) for value in payouts):
            errors.append("'payouts' must contain integers only.")

    payout_mode = data.get("payoutMode")
    if payout_mode is not None and payout_mode not in PAYOUT_MODES:
        modes = ", ".join(f"'{mode}'" for mode in PAYOUT_MODES)
        errors.append(f"'payoutMode' must be one of {modes}, got '{payout_mode}'.")

    overwrite = data.get("allowSealedOverwrite")
    if overwrite is not None and not isinstance(overwrite, bool):
        errors.append("'allowSealedOverwrite' must be a boolean.")

    if errors:
        return errors

    # Structure is sound; check the combined rules for playability.
    return validate_rules(_build_rules(data))


def _build_rules(data: dict[str, Any]) -> RulesConfig:
    rules = RulesConfig()
    if "artists" in data:
        rules.artists = tuple(str(name) for name in data["artists"])
    for key, attribute in _INT_FIELDS.items():
        if key in data:
            setattr(rules, attribute, int(data[key]))
    if "payouts" in data:
        rules.payouts = tuple(int(value) for value in data["payouts"])
    if "payoutMode" in data:
        rules.payout_mode = data["payoutMode"]
    if "allowSealedOverwrite" in data:
        rules.allow_sealed_overwrite = bool(data["allowSealedOverwrite"])
    return rules


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
