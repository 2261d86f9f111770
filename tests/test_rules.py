import pytest

from pivot.core.config import RulesConfig
from pivot.core.errors import ConfigError
from pivot.rules import (
    BruteForceRule,
    Rule,
    RuleEngine,
    RuleSet,
    brute_force_rule,
    default_ruleset,
    evaluate_rules,
    rule,
)


def failed_logins(new_event, count, ip="1.2.3.4"):
    return [new_event(f"{ip}-{i}", seconds=i, message="FAILED LOGIN for root", ip=ip) for i in range(count)]


def test_brute_force_boundary(new_event):
    assert BruteForceRule.evaluate(failed_logins(new_event, 4)) is True
    assert BruteForceRule.evaluate(failed_logins(new_event, 3)) is False


def test_brute_force_counts_per_ip(new_event):
    events = failed_logins(new_event, 3, ip="1.1.1.1") + failed_logins(new_event, 3, ip="2.2.2.2")
    assert BruteForceRule.evaluate(events) is False


def test_brute_force_ignores_events_without_ip(new_event):
    events = [new_event(i, message="failed login") for i in range(10)]
    assert BruteForceRule.evaluate(events) is False


def test_brute_force_threshold_is_configurable(new_event):
    assert brute_force_rule(threshold=1).evaluate(failed_logins(new_event, 2)) is True


def test_findings_in_registration_order(new_event):
    always = Rule("R-A", "Always", "Fires always", lambda events: True)
    never = Rule("R-N", "Never", "Never fires", lambda events: False)
    engine = RuleEngine(RuleSet([always, BruteForceRule, never]))

    findings = engine.evaluate(failed_logins(new_event, 4))
    assert [f.rule_id for f in findings] == ["R-A", "R-001"]
    assert findings[1].text.startswith("Rule Triggered: Potential Brute Force")


def test_failing_rule_is_isolated(new_event, capsys):
    def explode(events):
        raise RuntimeError("boom")

    broken = Rule("R-X", "Broken", "Raises", explode)
    rules = RuleSet([broken, BruteForceRule])

    findings = evaluate_rules(rules, failed_logins(new_event, 4))
    assert len(findings) == 1
    assert "Potential Brute Force" in findings[0]
    assert "R-X" in capsys.readouterr().err


def test_predicate_receives_immutable_events(new_event):
    seen = []

    @rule("R-T", "Type check", "Records the argument type")
    def record_type(events):
        seen.append(type(events))
        return False

    RuleEngine(RuleSet([record_type])).evaluate([new_event(1)])
    assert seen == [tuple]


def test_ruleset_rejects_duplicate_ids():
    with pytest.raises(ConfigError):
        RuleSet([BruteForceRule, brute_force_rule(5)])


def test_ruleset_without_and_with_rules():
    extra = Rule("R-Z", "Z", "z", lambda events: False)
    rules = RuleSet([BruteForceRule]).with_rules(extra)
    assert rules.ids == ["R-001", "R-Z"]
    assert "R-001" not in rules.without(["R-001"])
    assert len(rules) == 2


def test_default_ruleset_honors_config():
    assert default_ruleset().ids == ["R-001"]
    assert default_ruleset(RulesConfig(disabled=["R-001"])).ids == []
