"""
Shared error handling for the Warden authorization engine.
"""

from typing import Dict, Any, Optional


class WardenException(Exception):
    """Base exception for Warden."""
    
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for logging or transport."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class DuplicateRuleError(WardenException):
    """Two rules share the same (object type, action) key."""
    
    def __init__(self, object_type: str, action: str):
        super().__init__(
            "DUPLICATE_RULE",
            f"Duplicate rule for object '{object_type}' and action '{action}'",
            {"object_type": object_type, "action": action}
        )


class InvalidRuleError(WardenException):
    """Rule or rule record is malformed."""
    
    def __init__(self, message: str = "Invalid rule", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_RULE", message, details)


class UnresolvedCheckError(WardenException):
    """Check provider cannot resolve a check name."""
    
    def __init__(self, name: str, details: Optional[Dict[str, Any]] = None):
        self.name = name
        super().__init__("UNRESOLVED_CHECK", f"Check function '{name}' cannot be resolved", details)


class UnresolvedHookError(WardenException):
    """Check provider cannot resolve a hook name."""
    
    def __init__(self, name: str, target: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.name = name
        self.target = target
        qualified = f"{target}.{name}" if target else name
        super().__init__("UNRESOLVED_HOOK", f"Hook function '{qualified}' cannot be resolved", details)


class AccessDeniedError(WardenException):
    """Authorization was denied."""
    
    def __init__(self, object_type: str, action: str, message: str = "Authorization failed"):
        super().__init__(
            "ACCESS_DENIED",
            message,
            {"object_type": object_type, "action": action}
        )


class ConfigurationError(WardenException):
    """Engine configuration is incomplete or invalid."""
    
    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
