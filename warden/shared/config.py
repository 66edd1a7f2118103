"""
Shared configuration management for the Warden authorization engine.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WardenConfig(BaseSettings):
    """Engine configuration, read from WARDEN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WARDEN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    log_json: bool = Field(default=True)
    
    # Check provider
    check_module: Optional[str] = Field(default=None, description="Dotted path of the module holding check functions")
    hook_module: Optional[str] = Field(default=None, description="Dotted path of the module holding default hooks")
    
    # Observability
    metrics_enabled: bool = Field(default=False)
    metrics_port: int = Field(default=9090)


def get_config(**overrides) -> WardenConfig:
    """Get engine configuration, with explicit overrides taking precedence."""
    return WardenConfig(**overrides)
