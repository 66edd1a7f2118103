"""
Rule data models for the Warden authorization engine.

A rule binds an (object type, action) pair to two condition trees and an
ordered list of hydration hooks. Condition trees are OR-of-AND structures:

- ``[{"role": "editor"}, {"role": "writer"}]`` - role is editor OR role is
  writer
- ``[[{"role": "editor"}], [{"role": "writer"}]]`` - same as above
- ``[[{"role": "editor"}], [{"role": "writer"}, "own_resource"]]`` - role is
  editor OR (role is writer AND the object is the subject's own resource)
"""

from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from warden.shared.errors import InvalidRuleError


@dataclass(frozen=True)
class NamedCheck:
    """Check called as ``check(subject, object)``."""
    name: str


@dataclass(frozen=True)
class ParamCheck:
    """Check called as ``check(subject, object, param)``.

    ``param`` is opaque and forwarded verbatim.
    """
    name: str
    param: Any = None


CheckRef = Union[NamedCheck, ParamCheck]
Term = Union[bool, NamedCheck, ParamCheck]
Group = Tuple[Term, ...]


def _is_term(value: Any) -> bool:
    return isinstance(value, (bool, NamedCheck, ParamCheck))


def _as_group(value: Any) -> Group:
    if _is_term(value):
        return (value,)
    if isinstance(value, (list, tuple)) and all(_is_term(term) for term in value):
        return tuple(value)
    raise InvalidRuleError(
        "Condition groups must be a check, a literal, or a sequence of those",
        {"group": repr(value)}
    )


@dataclass(frozen=True)
class ConditionTree:
    """Disjunction of conjunction groups.

    Groups are normalized to tuples, so a single check and a one-element
    conjunction are the same group.
    """
    groups: Tuple[Group, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "groups", tuple(_as_group(group) for group in self.groups))

    @classmethod
    def of(cls, *groups: Any) -> "ConditionTree":
        """Build a tree from positional groups."""
        return cls(groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass(frozen=True)
class HookRef:
    """Hydration step run before the checks.

    Without a ``target`` the hook resolves against the provider's default
    hook namespace. With a ``target`` it resolves against that namespace
    and ``extra_args`` are appended after subject and object.
    """
    name: str
    target: Optional[str] = None
    extra_args: Tuple[Any, ...] = ()


def _as_tree(value: Any, side: str) -> ConditionTree:
    if isinstance(value, ConditionTree):
        return value
    if not isinstance(value, (list, tuple)):
        raise InvalidRuleError(
            f"Rule {side} must be a ConditionTree or a sequence of groups",
            {"field": side, "value": repr(value)}
        )
    return ConditionTree(tuple(value))


def _as_hooks(value: Any) -> Tuple[HookRef, ...]:
    if not isinstance(value, (list, tuple)):
        raise InvalidRuleError("Rule pre_hooks must be a sequence of HookRef", {"value": repr(value)})
    for hook in value:
        if not isinstance(hook, HookRef):
            raise InvalidRuleError("Rule pre_hooks entries must be HookRef", {"hook": repr(hook)})
    return tuple(value)


@dataclass(frozen=True)
class Rule:
    """Authorization rule for one (object type, action) pair."""
    object_type: str
    action: str
    allow: ConditionTree = field(default_factory=ConditionTree)
    deny: ConditionTree = field(default_factory=ConditionTree)
    pre_hooks: Tuple[HookRef, ...] = ()
    description: Optional[str] = None

    def __post_init__(self):
        if not self.object_type:
            raise InvalidRuleError("Rule object type is required", {"action": self.action})
        if not self.action:
            raise InvalidRuleError("Rule action is required", {"object_type": self.object_type})

        object.__setattr__(self, "allow", _as_tree(self.allow, "allow"))
        object.__setattr__(self, "deny", _as_tree(self.deny, "deny"))
        object.__setattr__(self, "pre_hooks", _as_hooks(self.pre_hooks))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.object_type, self.action)


# Authoring shorthand

def parse_term(value: Any) -> List[Term]:
    """Parse one shorthand check into terms.

    ``"name"`` is a two-argument check, ``("name", param)`` and
    ``{"name": param}`` are three-argument checks. A dict with several
    keys yields several terms, all of which must hold.
    """
    if _is_term(value):
        return [value]
    if isinstance(value, str):
        if not value:
            raise ValueError("check name must not be empty")
        return [NamedCheck(value)]
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], str):
        return [ParamCheck(value[0], value[1])]
    if isinstance(value, dict) and value:
        return [ParamCheck(str(name), param) for name, param in value.items()]
    raise ValueError(f"unsupported check: {value!r}")


def parse_group(value: Any) -> Group:
    if isinstance(value, list):
        terms: List[Term] = []
        for item in value:
            terms.extend(parse_term(item))
        return tuple(terms)
    return tuple(parse_term(value))


def parse_tree(value: Any) -> ConditionTree:
    """Parse a shorthand allow/deny value into a condition tree."""
    if isinstance(value, ConditionTree):
        return value
    if value is None:
        return ConditionTree()
    if not isinstance(value, list):
        value = [value]
    return ConditionTree(tuple(parse_group(group) for group in value))


def parse_hook(value: Any) -> HookRef:
    """Parse ``"name"``, ``(target, name)`` or ``(target, name, args)``."""
    if isinstance(value, HookRef):
        return value
    if isinstance(value, str) and value:
        return HookRef(value)
    if isinstance(value, dict) and "name" in value:
        return HookRef(value["name"], value.get("target"), tuple(value.get("args") or ()))
    if isinstance(value, (list, tuple)) and len(value) in (2, 3):
        target, name = value[0], value[1]
        extra_args: Tuple[Any, ...] = ()
        if len(value) == 3:
            args = value[2]
            extra_args = tuple(args) if isinstance(args, (list, tuple)) else (args,)
        return HookRef(name, target, extra_args)
    raise ValueError(f"unsupported hook: {value!r}")


class RuleRecord(BaseModel):
    """Rule-construction record as supplied by an authoring surface."""

    model_config = ConfigDict(frozen=True)

    object_type: str = Field(..., min_length=1, description="Object type, e.g. 'article'")
    action: str = Field(..., min_length=1, description="Action, e.g. 'update'")
    # Parsed into ConditionTree / HookRef values by the validators below
    allow: Any = Field(default_factory=ConditionTree, description="Checks that allow the action")
    deny: Any = Field(default_factory=ConditionTree, description="Checks that explicitly deny the action")
    pre_hooks: Any = Field(default=(), description="Hooks run before the checks")
    description: Optional[str] = Field(None, description="Rule description")

    @field_validator("allow", "deny", mode="before")
    @classmethod
    def _parse_tree(cls, value: Any) -> ConditionTree:
        return parse_tree(value)

    @field_validator("pre_hooks", mode="before")
    @classmethod
    def _parse_hooks(cls, value: Any) -> Tuple[HookRef, ...]:
        if value is None:
            return ()
        if isinstance(value, (str, dict, HookRef)):
            value = [value]
        elif isinstance(value, tuple) and not all(isinstance(hook, HookRef) for hook in value):
            # a bare tuple is a single qualified hook
            value = [value]
        return tuple(parse_hook(hook) for hook in value)

    @classmethod
    def load(cls, data: Dict[str, Any]) -> "RuleRecord":
        """Validate a raw record, raising InvalidRuleError on failure."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidRuleError(
                "Invalid rule record",
                {
                    "object_type": data.get("object_type"),
                    "action": data.get("action"),
                    "errors": e.errors(include_url=False, include_context=False)
                }
            ) from e

    def to_rule(self) -> Rule:
        return Rule(
            object_type=self.object_type,
            action=self.action,
            allow=self.allow,
            deny=self.deny,
            pre_hooks=self.pre_hooks,
            description=self.description
        )
