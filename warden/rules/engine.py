"""
Decision engine for the Warden authorization engine.

Evaluation order for a known (object type, action):

1. Run the rule's pre-hooks in declaration order
2. Evaluate the deny tree; if it holds, the decision is False
3. Otherwise evaluate the allow tree

Every check listed in a tree is invoked, even once the outcome of its
group or tree is already known. Check functions may have side effects the
host relies on.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from warden.shared.config import WardenConfig, get_config
from warden.shared.logging import configure_logging, get_logger
from warden.shared.metrics import MetricsCollector, serve_metrics
from warden.shared.errors import AccessDeniedError, ConfigurationError
from .models import ConditionTree, Group, HookRef, ParamCheck, Term
from .policy import Policy
from .provider import CheckProvider, ModuleCheckProvider


@dataclass(frozen=True)
class UnknownActionSignal:
    """Emitted when a decision is requested for a key with no rule."""
    object_type: str
    action: str
    policy: Optional[str] = None


UnknownActionObserver = Callable[[UnknownActionSignal], None]


def invoke_check(term: Term, subject: Any, obj: Any, provider: CheckProvider) -> bool:
    """Evaluate a single literal or check reference."""
    if isinstance(term, bool):
        return term

    func = provider.resolve_check(term.name)
    if isinstance(term, ParamCheck):
        return bool(func(subject, obj, term.param))
    return bool(func(subject, obj))


def eval_group(group: Group, subject: Any, obj: Any, provider: CheckProvider) -> bool:
    """AND of all terms in a group. Every term is invoked."""
    if not group:
        return False

    results = [invoke_check(term, subject, obj, provider) for term in group]
    return all(results)


def eval_condition_tree(tree: ConditionTree, subject: Any, obj: Any, provider: CheckProvider) -> bool:
    """OR of all groups in a tree. Every group is evaluated."""
    if tree.is_empty:
        return False

    if len(tree.groups) == 1:
        return eval_group(tree.groups[0], subject, obj, provider)

    results = [eval_group(group, subject, obj, provider) for group in tree.groups]
    return any(results)


def run_hooks(hooks: Iterable[HookRef], subject: Any, obj: Any, provider: CheckProvider) -> Tuple[Any, Any]:
    """Thread subject and object through the hooks in order."""
    for hook in hooks:
        func = provider.resolve_hook(hook.name, hook.target)
        subject, obj = func(subject, obj, *hook.extra_args)
    return subject, obj


class DecisionEngine:
    """Authorization decision engine.

    Holds no per-call state: one engine may serve concurrent callers.

    Usage:
        engine = DecisionEngine(policy, provider)

        if engine.authorize("article", "update", current_user, article):
            # Proceed
    """

    def __init__(
        self,
        policy: Policy,
        provider: CheckProvider,
        observers: Iterable[UnknownActionObserver] = (),
        metrics: Optional[MetricsCollector] = None
    ):
        self.logger = get_logger("warden.engine")
        self.policy = policy
        self.provider = provider
        self.observers: List[UnknownActionObserver] = list(observers)
        self.metrics = metrics

    @classmethod
    def from_config(
        cls,
        policy: Policy,
        config: Optional[WardenConfig] = None,
        observers: Iterable[UnknownActionObserver] = ()
    ) -> "DecisionEngine":
        """Build an engine with a module provider described by configuration."""
        config = config or get_config()
        configure_logging("warden", config.log_level, config.log_json)

        if not config.check_module:
            raise ConfigurationError("check_module is required", {"setting": "WARDEN_CHECK_MODULE"})

        provider = ModuleCheckProvider(config.check_module, config.hook_module)

        metrics = None
        if config.metrics_enabled:
            metrics = serve_metrics(config.metrics_port)

        return cls(policy, provider, observers, metrics)

    def add_observer(self, observer: UnknownActionObserver) -> None:
        """Register a callback for unknown-action signals."""
        self.observers.append(observer)

    def authorize(self, object_type: str, action: str, subject: Any, obj: Any = None) -> bool:
        """Decide whether ``subject`` may perform ``action`` on ``obj``."""
        start_time = time.time()

        rule = self.policy.lookup(object_type, action)
        if rule is None:
            self._signal_unknown_action(object_type, action)
            return False

        try:
            subject, obj = run_hooks(rule.pre_hooks, subject, obj, self.provider)

            denied = eval_condition_tree(rule.deny, subject, obj, self.provider)
            allowed = False if denied else eval_condition_tree(rule.allow, subject, obj, self.provider)
        except Exception as e:
            if self.metrics:
                self.metrics.record_error(getattr(e, "code", type(e).__name__))
            self.logger.error(
                "Authorization evaluation failed",
                object_type=object_type,
                action=action,
                error=str(e)
            )
            raise

        self.logger.debug(
            "Authorization decision",
            object_type=object_type,
            action=action,
            allowed=allowed,
            denied_explicitly=denied
        )

        if self.metrics:
            self.metrics.record_decision(object_type, action, allowed, time.time() - start_time)

        return allowed

    def enforce(self, object_type: str, action: str, subject: Any, obj: Any = None) -> None:
        """Like authorize, but raise AccessDeniedError instead of returning False."""
        if not self.authorize(object_type, action, subject, obj):
            raise AccessDeniedError(object_type, action)

    def _signal_unknown_action(self, object_type: str, action: str) -> None:
        signal = UnknownActionSignal(object_type=object_type, action=action, policy=self.policy.name)

        self.logger.warning(
            "Permission checked for rule that does not exist",
            action=action,
            object_type=object_type,
            policy=self.policy.name
        )

        if self.metrics:
            self.metrics.record_unknown_action(object_type, action)

        for observer in self.observers:
            try:
                observer(signal)
            except Exception as e:
                # the decision stays False whatever the observer does
                self.logger.error("Unknown-action observer failed", action=action, error=str(e))


def authorize(
    policy: Policy,
    provider: CheckProvider,
    object_type: str,
    action: str,
    subject: Any,
    obj: Any = None,
    observers: Iterable[UnknownActionObserver] = ()
) -> bool:
    """One-shot decision without keeping an engine around."""
    return DecisionEngine(policy, provider, observers).authorize(object_type, action, subject, obj)
