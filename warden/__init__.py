"""
Warden authorization engine.

Decides whether a subject may perform an action on an object, using a
policy of declarative rules attached to (object type, action) pairs.

- warden.rules: Rule model, policy registry, check providers, and the
  decision engine.
- warden.shared: Configuration, logging, metrics, and errors.

Guidelines:
- Policies are immutable once built; share them freely.
- Decisions are computed fresh on every call; nothing is cached.
"""

from warden.rules.engine import DecisionEngine, UnknownActionSignal, authorize
from warden.rules.models import ConditionTree, HookRef, NamedCheck, ParamCheck, Rule, RuleRecord
from warden.rules.policy import Policy
from warden.rules.provider import CheckProvider, ModuleCheckProvider, RegistryCheckProvider

__version__ = "1.0.0"

__all__ = [
    "CheckProvider",
    "ConditionTree",
    "DecisionEngine",
    "HookRef",
    "ModuleCheckProvider",
    "NamedCheck",
    "ParamCheck",
    "Policy",
    "RegistryCheckProvider",
    "Rule",
    "RuleRecord",
    "UnknownActionSignal",
    "authorize",
]
