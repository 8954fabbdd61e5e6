"""
Application core.

Components:
- store.py: owned TaskStore (dispatch, undo/redo, listeners) + provider scope
- ports.py: Protocols the core depends on (snapshot slots)
- state.py: AppState wiring settings, store and persistence together
"""
