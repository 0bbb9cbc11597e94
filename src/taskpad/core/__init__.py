"""
Core contracts.

- errors.py: error hierarchy (InvalidInput, NotFound, CorruptPersistedState, ...)
- ports.py: Protocols for storage backends and snapshot writers
- state.py: AppState wiring used by the CLI and connectors
"""
