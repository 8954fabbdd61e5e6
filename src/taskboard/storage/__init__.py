"""
Durable snapshot storage.

Components:
- json_slot.py: snapshot slot backed by one JSON file
- sqlite_slot.py: snapshot slot backed by a SQLite key-value table
- persistence.py: adapter that hydrates the store and saves after commits
- seed.py: demo board used when nothing was persisted yet
"""
