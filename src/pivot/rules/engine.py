"""Rule engine for detection rules over an event set.

A rule is a pure predicate over the whole event set of one batch. The
engine holds an immutable, ordered RuleSet built once at startup and
reports a Finding for every rule whose predicate is true.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from pivot.core.errors import ConfigError
from pivot.core.logging import get_logger
from pivot.models.event import Event
from pivot.models.finding import Finding

logger = get_logger("rules")

Predicate = Callable[[Sequence[Event]], bool]


@dataclass(frozen=True)
class Rule:
    """A stateless, deterministic detection rule."""

    id: str
    name: str
    description: str
    predicate: Predicate

    def evaluate(self, events: Sequence[Event]) -> bool:
        """Run the predicate over an immutable view of the events."""
        return bool(self.predicate(tuple(events)))

    def finding(self) -> Finding:
        return Finding(rule_id=self.id, rule_name=self.name, description=self.description)


def rule(id: str, name: str, description: str) -> Callable[[Predicate], Rule]:
    """Decorator turning a predicate function into a Rule.

    Example:
        @rule("R-100", "Root Activity", "Any event from user root")
        def root_activity(events):
            return any(e.metadata.user_id == "root" for e in events)
    """

    def decorator(predicate: Predicate) -> Rule:
        return Rule(id=id, name=name, description=description, predicate=predicate)

    return decorator


class RuleSet:
    """Immutable, ordered collection of rules with unique ids."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        rules = tuple(rules)
        seen: set[str] = set()
        for r in rules:
            if r.id in seen:
                raise ConfigError(f"Duplicate rule id: {r.id}")
            seen.add(r.id)
        self._rules = rules

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return any(r.id == rule_id for r in self._rules)

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self._rules]

    def without(self, rule_ids: Iterable[str]) -> "RuleSet":
        """Return a copy with the given rule ids left out."""
        excluded = set(rule_ids)
        return RuleSet(r for r in self._rules if r.id not in excluded)

    def with_rules(self, *rules: Rule) -> "RuleSet":
        """Return a copy with extra rules appended."""
        return RuleSet((*self._rules, *rules))


class RuleEngine:
    """Evaluates a RuleSet against event sets."""

    def __init__(self, rules: RuleSet) -> None:
        self.rules = rules

    def evaluate(self, events: Sequence[Event]) -> list[Finding]:
        """Evaluate every rule in registration order.

        A rule that raises counts as not fired; the remaining rules
        still run.

        Returns:
            Findings for the rules that fired
        """
        snapshot = tuple(events)
        findings = []

        for r in self.rules:
            try:
                fired = r.evaluate(snapshot)
            except Exception as e:
                logger.warning(
                    "Rule failed, skipping",
                    rule_id=r.id,
                    error=f"{type(e).__name__}: {e}",
                )
                continue
            if fired:
                findings.append(r.finding())

        logger.debug("Evaluated rules", rules=len(self.rules), findings=len(findings))
        return findings


def evaluate_rules(rules: RuleSet, events: Sequence[Event]) -> list[str]:
    """Evaluate rules and return the finding strings."""
    return [finding.text for finding in RuleEngine(rules).evaluate(events)]
