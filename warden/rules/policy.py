"""
Policy registry for the Warden authorization engine.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from warden.shared.logging import get_logger
from warden.shared.errors import DuplicateRuleError
from .models import Rule, RuleRecord

logger = get_logger("warden.policy")

RuleKey = Tuple[str, str]


class Policy:
    """Immutable mapping from (object type, action) to Rule.

    Built once, then shared read-only by any number of callers.
    """

    __slots__ = ("_rules", "_name")

    def __init__(self, rules: Mapping[RuleKey, Rule], name: Optional[str] = None):
        object.__setattr__(self, "_rules", MappingProxyType(dict(rules)))
        object.__setattr__(self, "_name", name)

    def __setattr__(self, attr: str, value: Any) -> None:
        raise AttributeError(f"Policy is read-only; cannot set '{attr}'")

    def __delattr__(self, attr: str) -> None:
        raise AttributeError(f"Policy is read-only; cannot delete '{attr}'")

    @property
    def name(self) -> Optional[str]:
        return self._name

    @classmethod
    def build(cls, rules: Iterable[Rule], name: Optional[str] = None) -> "Policy":
        """Build a policy, failing on duplicate (object type, action) keys."""
        table: Dict[RuleKey, Rule] = {}
        for rule in rules:
            if rule.key in table:
                raise DuplicateRuleError(rule.object_type, rule.action)
            table[rule.key] = rule

        logger.info("Policy built", policy=name, rules=len(table))
        return cls(table, name)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Union[Rule, RuleRecord, Dict[str, Any]]],
        name: Optional[str] = None
    ) -> "Policy":
        """Build a policy from authoring records, dicts, or rules."""
        rules = []
        for record in records:
            if isinstance(record, dict):
                record = RuleRecord.load(record)
            if isinstance(record, RuleRecord):
                record = record.to_rule()
            rules.append(record)
        return cls.build(rules, name)

    def lookup(self, object_type: str, action: str) -> Optional[Rule]:
        """Get the rule for a key, or None when no rule exists."""
        return self._rules.get((object_type, action))

    def __contains__(self, key: object) -> bool:
        return key in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"Policy(name={self.name!r}, rules={len(self._rules)})"
