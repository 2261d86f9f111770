"""Pluggable detection rules."""

from pivot.rules.builtin import BruteForceRule, brute_force_rule, default_ruleset
from pivot.rules.engine import Rule, RuleEngine, RuleSet, evaluate_rules, rule

__all__ = [
    "BruteForceRule",
    "Rule",
    "RuleEngine",
    "RuleSet",
    "brute_force_rule",
    "default_ruleset",
    "evaluate_rules",
    "rule",
]
