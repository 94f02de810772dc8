"""
Task subsystem.

Components:
- task_models.py: the Task record and its wire (de)serialization
- task_store.py: SQLite-backed storage + filtered query/update helpers
"""
