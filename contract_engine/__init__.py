"""
Deterministic Contract Engine

Execution core for replicated contracts: schema-gated functions, feature hooks
and message interception over an ordered key-value store.
"""

__version__ = "0.1.0"
