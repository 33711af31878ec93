"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStats, OwnerScope)
- task_errors.py: domain errors raised by the store
- task_events.py: change notifications + in-process event hub
- task_store.py: per-owner store with all task operations
- task_db.py: SQLite persistence backend (optional write-through)
"""
