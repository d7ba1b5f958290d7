"""Configuration helpers for league table rules."""

from .rules import RULESETS, StandingsRules, default_rules, get_rules, iter_rules, rules_from_env

__all__ = [
    "RULESETS",
    "StandingsRules",
    "default_rules",
    "get_rules",
    "iter_rules",
    "rules_from_env",
]
