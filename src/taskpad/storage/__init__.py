"""
Key-value storage backends.

- memory_backend.py: dict-backed, process-local
- json_prefs.py: preferences-style JSON object file with atomic replace
- sqlite_backend.py: single `kv` table, one connection per call
"""
