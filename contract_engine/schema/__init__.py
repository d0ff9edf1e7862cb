"""
Schema validation for payloads.

Definitions are compiled once into strict pydantic models and then only ever
used through validate()/errors().
"""

from .validator import SchemaValidator, compile_schema

__all__ = [
    "SchemaValidator",
    "compile_schema",
]
