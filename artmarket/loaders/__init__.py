"""Loaders for declarative rules configuration."""

from .json_loader import (
    load_rules_from_json,
    parse_rules_dict,
    validate_rules_dict,
    validate_rules_file,
)

__all__ = [
    "load_rules_from_json",
    "parse_rules_dict",
    "validate_rules_dict",
    "validate_rules_file",
]
