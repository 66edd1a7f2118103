"""
Unit tests for check providers.
"""

import types

import pytest

import blog_checks
from warden.rules.provider import ModuleCheckProvider, RegistryCheckProvider
from warden.shared.errors import UnresolvedCheckError, UnresolvedHookError


class TestRegistryCheckProvider:
    """Test cases for RegistryCheckProvider."""

    @pytest.fixture
    def provider(self):
        """Create RegistryCheckProvider instance."""
        return RegistryCheckProvider()

    def test_constructor_tables(self):
        """Test checks and hooks passed at construction."""
        check = lambda s, o: True
        hook = lambda s, o: (s, o)
        provider = RegistryCheckProvider(checks={"ok": check}, hooks={"noop": hook})

        assert provider.resolve_check("ok") is check
        assert provider.resolve_hook("noop") is hook

    def test_decorators(self, provider):
        """Test decorator registration by function name and explicit name."""
        @provider.check()
        def same_user(subject, obj):
            return subject == obj

        @provider.check("role")
        def has_role(subject, obj, role):
            return subject == role

        @provider.hook(namespace="store")
        def load(subject, obj):
            return subject, obj

        assert provider.resolve_check("same_user") is same_user
        assert provider.resolve_check("role") is has_role
        assert provider.resolve_hook("load", "store") is load

    def test_namespaces_are_separate(self, provider):
        """Test default and named hook namespaces do not mix."""
        provider.register_hook("load", lambda s, o: (s, o), namespace="store")

        with pytest.raises(UnresolvedHookError):
            provider.resolve_hook("load")

    def test_checks_and_hooks_are_separate(self, provider):
        """Test a hook name does not resolve as a check."""
        provider.register_hook("load", lambda s, o: (s, o))

        with pytest.raises(UnresolvedCheckError):
            provider.resolve_check("load")

    def test_unresolved_check(self, provider):
        """Test missing check error carries the name."""
        with pytest.raises(UnresolvedCheckError) as exc_info:
            provider.resolve_check("missing")

        assert exc_info.value.name == "missing"
        assert exc_info.value.code == "UNRESOLVED_CHECK"

    def test_unresolved_hook_in_unknown_namespace(self, provider):
        """Test missing namespace error carries the target."""
        with pytest.raises(UnresolvedHookError) as exc_info:
            provider.resolve_hook("load", "nowhere")

        assert exc_info.value.target == "nowhere"
        assert "nowhere.load" in exc_info.value.message


class TestModuleCheckProvider:
    """Test cases for ModuleCheckProvider."""

    def test_resolve_from_dotted_path(self):
        """Test check module given by name."""
        provider = ModuleCheckProvider("blog_checks")

        assert provider.resolve_check("role") is blog_checks.role
        assert provider.resolve_hook("preload_groups") is blog_checks.preload_groups

    def test_resolve_from_module_object(self):
        """Test check module given as a module object."""
        module = types.ModuleType("inline_checks")
        module.always = lambda s, o: True

        provider = ModuleCheckProvider(module)

        assert provider.resolve_check("always") is module.always

    def test_separate_hook_module(self):
        """Test default hooks come from the hook module."""
        provider = ModuleCheckProvider("blog_checks", "blog_hooks")

        with pytest.raises(UnresolvedHookError):
            provider.resolve_hook("preload_groups")
        assert provider.resolve_hook("promote").__module__ == "blog_hooks"

    def test_qualified_hook_imports_target(self):
        """Test qualified hooks resolve against their target module."""
        provider = ModuleCheckProvider("blog_checks")

        hook = provider.resolve_hook("tag_object", "blog_hooks")

        assert hook.__name__ == "tag_object"

    def test_missing_check(self):
        """Test unknown and non-callable attributes are unresolved."""
        provider = ModuleCheckProvider("blog_checks")

        with pytest.raises(UnresolvedCheckError):
            provider.resolve_check("missing")
        with pytest.raises(UnresolvedCheckError) as exc_info:
            provider.resolve_check("not_a_function")

        assert exc_info.value.details == {"module": "blog_checks"}

    def test_missing_hook_target(self):
        """Test an unimportable target is unresolved."""
        provider = ModuleCheckProvider("blog_checks")

        with pytest.raises(UnresolvedHookError) as exc_info:
            provider.resolve_hook("load", "no_such_module_for_warden")

        assert exc_info.value.target == "no_such_module_for_warden"

    def test_missing_check_module(self):
        """Test an unimportable check module fails at construction."""
        with pytest.raises(ImportError):
            ModuleCheckProvider("no_such_module_for_warden")
