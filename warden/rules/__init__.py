"""
Rules engine package.

Defines the rule model and the decision engine. A rule holds an allow
tree, a deny tree, and pre-hooks for one (object type, action) pair; the
engine runs the hooks, then lets deny override allow.

Modules of interest:
- models: Check and hook references, condition trees, rules, and records.
- policy: Immutable registry of rules keyed by (object type, action).
- provider: Resolution of check and hook names to callables.
- engine: Evaluation algorithm and unknown-action signalling.
"""
