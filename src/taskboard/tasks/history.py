# src/taskboard/tasks/history.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .applier import apply_action
from .deltas import Delta, make_delta
from .task_actions import Action, ActionKind
from .task_models import BoardState, GroupField

MAX_HISTORY_LENGTH: Final[int] = 50


@dataclass(frozen=True, slots=True)
class HistoryState:
    present: BoardState
    past: tuple[Delta, ...] = ()
    future: tuple[Delta, ...] = ()

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0


def reduce_history(
    history: HistoryState,
    action: Action,
    *,
    group_by: GroupField = GroupField.STATUS,
    limit: int = MAX_HISTORY_LENGTH,
) -> HistoryState:
    """
    History state machine over {past, present, future}.

    - UNDO pops the newest delta, applies its inverse, moves it to the head of future.
    - REDO takes the head of future, replays it, pushes it back onto past.
    - LOAD_STATE replaces present and clears both stacks.
    - Anything else is applied; its delta (if any) is pushed onto past and
      future is cleared either way.

    Both stacks keep at most `limit` entries: past drops its oldest, future
    its farthest. `limit` is capped at MAX_HISTORY_LENGTH.
    """
    limit = min(MAX_HISTORY_LENGTH, max(0, int(limit)))

    if action.kind == ActionKind.UNDO:
        if not history.past:
            return history
        last = history.past[-1]
        return HistoryState(
            present=apply_action(history.present, last.inverse, group_by=group_by),
            past=history.past[:-1],
            future=(last, *history.future)[:limit],
        )

    if action.kind == ActionKind.REDO:
        if not history.future:
            return history
        nxt = history.future[0]
        return HistoryState(
            present=apply_action(history.present, nxt.forward(), group_by=group_by),
            past=_keep_newest((*history.past, nxt), limit),
            future=history.future[1:],
        )

    if action.kind == ActionKind.LOAD_STATE:
        return HistoryState(present=apply_action(history.present, action, group_by=group_by))

    present = apply_action(history.present, action, group_by=group_by)
    delta = None if present is history.present else make_delta(action, history.present, present)
    past = history.past if delta is None else _keep_newest((*history.past, delta), limit)
    return HistoryState(present=present, past=past, future=())


def _keep_newest(entries: tuple[Delta, ...], limit: int) -> tuple[Delta, ...]:
    if len(entries) <= limit:
        return entries
    return entries[len(entries) - limit :]
