"""Built-in detection rules."""

from collections import Counter
from collections.abc import Sequence

from pivot.core.config import RulesConfig
from pivot.models.event import Event
from pivot.rules.engine import Rule, RuleSet

BRUTE_FORCE_RULE_ID = "R-001"
FAILED_LOGIN_MARKER = "failed login"


def failed_logins_by_ip(events: Sequence[Event]) -> Counter[str]:
    """Count failed-login events per source ip."""
    counts: Counter[str] = Counter()
    for event in events:
        ip = event.metadata.ip
        if ip and FAILED_LOGIN_MARKER in event.message.lower():
            counts[ip] += 1
    return counts


def brute_force_rule(threshold: int = 3) -> Rule:
    """Fires when any ip has strictly more than ``threshold`` failed logins."""

    def predicate(events: Sequence[Event]) -> bool:
        return any(count > threshold for count in failed_logins_by_ip(events).values())

    return Rule(
        id=BRUTE_FORCE_RULE_ID,
        name="Potential Brute Force",
        description=f"More than {threshold} failed logins from the same IP",
        predicate=predicate,
    )


BruteForceRule = brute_force_rule()


def default_ruleset(config: RulesConfig | None = None) -> RuleSet:
    """Build the built-in rule set honoring the rules config."""
    config = config or RulesConfig()
    rules = RuleSet([brute_force_rule(config.brute_force_threshold)])
    return rules.without(config.disabled)
