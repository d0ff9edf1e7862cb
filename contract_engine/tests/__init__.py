"""
Test suite for the contract engine.

Focus areas:
- Canonical serialization determinism
- Schema gating and strict validation
- Classification and store visibility rules
- Replay determinism across independent stores
"""
