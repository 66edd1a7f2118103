"""
Shared utilities for the Warden authorization engine.

This package aggregates the ambient building blocks used by the rule
engine:

- config: Engine configuration via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus metrics helpers
- errors: Canonical error types

Do not import from warden.rules into shared/.
"""
