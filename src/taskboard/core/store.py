# src/taskboard/core/store.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from contextvars import ContextVar

from ..tasks import task_actions
from ..tasks.history import MAX_HISTORY_LENGTH, HistoryState, reduce_history
from ..tasks.task_actions import Action
from ..tasks.task_models import BoardState, GroupField
from .ports import StateListener

logger = logging.getLogger(__name__)


class StoreNotProvidedError(RuntimeError):
    """use_store() was called outside of provide_store(): a wiring defect."""


class StoreClosedError(RuntimeError):
    """dispatch() was called after close()."""


class TaskStore:
    """
    Owned board store.

    Wraps the history reducer and notifies listeners after every committed
    change of `present`. Actions are processed one at a time to completion.

    Lifecycle:
    - construct with an initial state (defaults to an empty board)
    - dispatch / undo / redo
    - close() drops listeners and rejects further dispatches
    """

    def __init__(
        self,
        initial: BoardState | None = None,
        *,
        group_by: GroupField = GroupField.STATUS,
        history_limit: int = MAX_HISTORY_LENGTH,
    ) -> None:
        self._history = HistoryState(present=initial if initial is not None else BoardState())
        self._group_by = GroupField(group_by)
        self._history_limit = min(MAX_HISTORY_LENGTH, max(0, int(history_limit)))
        self._listeners: list[StateListener] = []
        self._closed = False

    # ---- read surface ----

    @property
    def state(self) -> BoardState:
        return self._history.present

    @property
    def history(self) -> HistoryState:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def group_by(self) -> GroupField:
        return self._group_by

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- write surface ----

    def dispatch(self, action: Action) -> BoardState:
        if self._closed:
            raise StoreClosedError("TaskStore is closed")

        before = self._history.present
        self._history = reduce_history(
            self._history, action, group_by=self._group_by, limit=self._history_limit
        )
        after = self._history.present
        logger.debug(
            "dispatch %s changed=%s past=%d future=%d",
            action.kind,
            after is not before,
            len(self._history.past),
            len(self._history.future),
        )

        if after is not before:
            self._notify(after)
        return after

    def undo(self) -> BoardState:
        return self.dispatch(task_actions.undo())

    def redo(self) -> BoardState:
        return self.dispatch(task_actions.redo())

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a commit listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, state: BoardState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Store listener %r failed", listener)

    # ---- lifecycle ----

    def close(self) -> None:
        if self._closed:
            return
        self._listeners.clear()
        self._closed = True
        logger.debug("TaskStore closed")

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


_current_store: ContextVar[TaskStore | None] = ContextVar("taskboard_store", default=None)


@contextlib.contextmanager
def provide_store(store: TaskStore) -> Iterator[TaskStore]:
    """Bind `store` as the current store for the enclosed scope."""
    token = _current_store.set(store)
    try:
        yield store
    finally:
        _current_store.reset(token)


def use_store() -> TaskStore:
    store = _current_store.get()
    if store is None:
        raise StoreNotProvidedError("use_store() must be called within provide_store()")
    return store
