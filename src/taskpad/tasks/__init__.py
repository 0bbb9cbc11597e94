"""
Task subsystem.

Components:
- task_models.py: data structures (Task)
- persistence.py: JSON snapshot codec + PersistenceGateway over a key-value store
- autosave.py: persistence triggers (synchronous / ordered background worker)
- task_store.py: TaskListStore, the in-memory list that owns ids and mutations
"""
