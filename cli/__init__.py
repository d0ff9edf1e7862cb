"""
Contract Engine CLI - deterministic contract execution

Commands:
- contract-engine log append/tail/verify - Operation log operations
- contract-engine replay - Replay the operation log through the sample contract
- contract-engine version
"""

__version__ = "0.1.0"
