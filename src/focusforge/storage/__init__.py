"""
Storage subsystem.

Components:
- keys.py: the fixed persisted key space (StorageKey)
- store.py: Storage, the JSON adapter that never raises
- sqlite_backend.py: SQLite key-value substrate
"""
