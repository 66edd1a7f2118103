"""
Check providers for the Warden authorization engine.

A provider turns the names referenced by rules into callables. Checks
take ``(subject, object)`` or ``(subject, object, param)`` and return a
truthy value; hooks take ``(subject, object, *extra_args)`` and return an
updated ``(subject, object)`` pair.
"""

import importlib
from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Tuple, Union

from warden.shared.logging import get_logger
from warden.shared.errors import UnresolvedCheckError, UnresolvedHookError

CheckFunction = Callable[..., Any]
HookFunction = Callable[..., Tuple[Any, Any]]


class CheckProvider(ABC):
    """Resolves check and hook names to callables."""

    @abstractmethod
    def resolve_check(self, name: str) -> CheckFunction:
        """Return the check called ``name`` or raise UnresolvedCheckError."""

    @abstractmethod
    def resolve_hook(self, name: str, target: Optional[str] = None) -> HookFunction:
        """Return the hook called ``name`` or raise UnresolvedHookError.

        ``target`` selects an explicit namespace; None means the default
        hook namespace.
        """


class RegistryCheckProvider(CheckProvider):
    """Function-table provider.

    Usage:
        provider = RegistryCheckProvider()

        @provider.check()
        def own_resource(subject, obj):
            return obj["owner_id"] == subject["id"]

        @provider.hook()
        def preload_groups(subject, obj):
            return subject, {**obj, "groups": load_groups(obj)}
    """

    def __init__(
        self,
        checks: Optional[Dict[str, CheckFunction]] = None,
        hooks: Optional[Dict[str, HookFunction]] = None
    ):
        self._checks: Dict[str, CheckFunction] = dict(checks or {})
        # namespace -> name -> hook; None is the default namespace
        self._hooks: Dict[Optional[str], Dict[str, HookFunction]] = {None: dict(hooks or {})}

    def register_check(self, name: str, func: CheckFunction) -> None:
        self._checks[name] = func

    def register_hook(self, name: str, func: HookFunction, namespace: Optional[str] = None) -> None:
        self._hooks.setdefault(namespace, {})[name] = func

    def check(self, name: Optional[str] = None) -> Callable[[CheckFunction], CheckFunction]:
        """Decorator registering a check under ``name`` or its own name."""
        def decorator(func: CheckFunction) -> CheckFunction:
            self.register_check(name or func.__name__, func)
            return func
        return decorator

    def hook(self, name: Optional[str] = None, namespace: Optional[str] = None) -> Callable[[HookFunction], HookFunction]:
        """Decorator registering a hook under ``name`` or its own name."""
        def decorator(func: HookFunction) -> HookFunction:
            self.register_hook(name or func.__name__, func, namespace)
            return func
        return decorator

    def resolve_check(self, name: str) -> CheckFunction:
        try:
            return self._checks[name]
        except KeyError:
            raise UnresolvedCheckError(name) from None

    def resolve_hook(self, name: str, target: Optional[str] = None) -> HookFunction:
        try:
            return self._hooks[target][name]
        except KeyError:
            raise UnresolvedHookError(name, target) from None


def _load_module(module: Union[str, ModuleType]) -> ModuleType:
    if isinstance(module, ModuleType):
        return module
    return importlib.import_module(module)


class ModuleCheckProvider(CheckProvider):
    """Provider resolving names as functions of Python modules.

    Checks are looked up in ``check_module``; default hooks in
    ``hook_module`` (the check module when omitted). A qualified hook's
    target is imported by dotted path.
    """

    def __init__(self, check_module: Union[str, ModuleType], hook_module: Union[str, ModuleType, None] = None):
        self.logger = get_logger("warden.provider")
        self.check_module = _load_module(check_module)
        self.hook_module = _load_module(hook_module) if hook_module is not None else self.check_module

        self.logger.debug(
            "Module check provider initialized",
            check_module=self.check_module.__name__,
            hook_module=self.hook_module.__name__
        )

    def resolve_check(self, name: str) -> CheckFunction:
        func = getattr(self.check_module, name, None)
        if not callable(func):
            raise UnresolvedCheckError(name, {"module": self.check_module.__name__})
        return func

    def resolve_hook(self, name: str, target: Optional[str] = None) -> HookFunction:
        if target is None:
            module = self.hook_module
        else:
            try:
                module = importlib.import_module(target)
            except ImportError as e:
                raise UnresolvedHookError(name, target, {"error": str(e)}) from e

        func = getattr(module, name, None)
        if not callable(func):
            raise UnresolvedHookError(name, target, {"module": module.__name__})
        return func
