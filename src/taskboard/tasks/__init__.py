"""
Task board engine.

Components:
- task_models.py: data structures (Task, CustomField, BoardState, enums)
- task_actions.py: Action vocabulary and payload constructors
- grouping.py: GroupOrder bucket maintenance
- applier.py: pure (state, action) -> state transitions
- deltas.py: reversible history entries (inverse synthesis)
- history.py: bounded undo/redo state machine
- queries.py: filter/sort/paginate helpers for views
"""
