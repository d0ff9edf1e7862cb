"""
Exception types for the contract execution core.

Declines are not exceptions: a handler refuses an operation by returning a
Decline. Everything below is either a programming error surfaced at
construction time or a fault that must reach the ledger layer unchanged.
"""


class ContractError(Exception):
    """Base class for contract execution errors."""
    pass


class DuplicateBindingError(ContractError):
    """Raised when a function, feature, schema or message handler is bound twice."""
    pass


class UnknownSchemaError(ContractError):
    """Raised when a binding or validation refers to a schema that was never registered."""
    pass


class RegistrySealedError(ContractError):
    """Raised when registering after the contract started executing operations."""
    pass


class StoreAccessError(ContractError):
    """Raised when get/put is used outside an active handler invocation."""
    pass


class StoreUnavailableError(ContractError):
    """Raised when the key-value store cannot be read or written."""
    pass


class ConcurrentExecutionError(ContractError):
    """Raised when an operation is delivered while another is still in flight."""
    pass


class DeterminismError(ContractError):
    """Raised when a value cannot be serialized canonically."""
    pass


class LogIntegrityError(ContractError):
    """Raised when the operation log hash chain does not verify."""
    pass
