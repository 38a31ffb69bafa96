"""Rebuild play sessions for one application and account from the event log.

Reconstruction runs in two passes over the events that belong to the target
(application, account) pair:

1. ``locate_sessions`` walks the pair's events through the session state
   machine and records a ``SessionSpan`` (first event index and run length) for
   every launch-to-exit run without copying any events.
2. ``build_session`` replays the events of one span through the same machine
   and accumulates focus intervals from steady timestamps.

The state machine (``_TRANSITIONS``) maps ``(state, sub kind)`` to
``(next state, action)``:

    CLOSED         LAUNCH -> FOCUS_PENDING (open), anything else ignored
    OPEN           LAUNCH -> FOCUS_PENDING (reopen)
                   GAINED_FOCUS -> FOCUS_PENDING (focus_start)
                   LOST_FOCUS ignored
                   EXIT -> CLOSED (close)
    FOCUS_PENDING  LAUNCH -> FOCUS_PENDING (reopen)
                   GAINED_FOCUS ignored
                   LOST_FOCUS -> OPEN (focus_end)
                   EXIT -> CLOSED (close)

A freshly launched application holds focus, so LAUNCH enters FOCUS_PENDING.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence

from .models import (
    NO_ACCOUNT,
    EventKind,
    EventSubKind,
    FocusInterval,
    PlayEvent,
    PlaySession,
    SessionStatus,
)

logger = logging.getLogger(__name__)


class _State(Enum):
    CLOSED = "closed"
    OPEN = "open"
    FOCUS_PENDING = "focus_pending"


class _Action(Enum):
    OPEN = "open"
    REOPEN = "reopen"
    CLOSE = "close"
    FOCUS_START = "focus_start"
    FOCUS_END = "focus_end"
    IGNORE = "ignore"


_TRANSITIONS: dict[tuple[_State, EventSubKind], tuple[_State, _Action]] = {
    (_State.CLOSED, EventSubKind.LAUNCH): (_State.FOCUS_PENDING, _Action.OPEN),
    (_State.CLOSED, EventSubKind.GAINED_FOCUS): (_State.CLOSED, _Action.IGNORE),
    (_State.CLOSED, EventSubKind.LOST_FOCUS): (_State.CLOSED, _Action.IGNORE),
    (_State.CLOSED, EventSubKind.EXIT): (_State.CLOSED, _Action.IGNORE),
    (_State.OPEN, EventSubKind.LAUNCH): (_State.FOCUS_PENDING, _Action.REOPEN),
    (_State.OPEN, EventSubKind.GAINED_FOCUS): (_State.FOCUS_PENDING, _Action.FOCUS_START),
    (_State.OPEN, EventSubKind.LOST_FOCUS): (_State.OPEN, _Action.IGNORE),
    (_State.OPEN, EventSubKind.EXIT): (_State.CLOSED, _Action.CLOSE),
    (_State.FOCUS_PENDING, EventSubKind.LAUNCH): (_State.FOCUS_PENDING, _Action.REOPEN),
    (_State.FOCUS_PENDING, EventSubKind.GAINED_FOCUS): (_State.FOCUS_PENDING, _Action.IGNORE),
    (_State.FOCUS_PENDING, EventSubKind.LOST_FOCUS): (_State.OPEN, _Action.FOCUS_END),
    (_State.FOCUS_PENDING, EventSubKind.EXIT): (_State.CLOSED, _Action.CLOSE),
}


@dataclass(frozen=True, slots=True)
class SessionSpan:
    """Locates one session run inside the event sequence."""

    start_index: int
    length: int


def iter_attributed_events(
    events: Sequence[PlayEvent],
) -> Iterator[tuple[int, PlayEvent, int]]:
    """Yield ``(index, event, account)`` for every application event.

    Application records that do not name an account are attributed to the most
    recently activated account that is still active.
    """
    active_accounts: list[int] = []
    for index, event in enumerate(events):
        if event.kind is EventKind.ACCOUNT:
            if event.account in active_accounts:
                active_accounts.remove(event.account)
            if event.sub_kind is EventSubKind.ACCOUNT_ACTIVE:
                active_accounts.append(event.account)
            continue
        account = event.account
        if account == NO_ACCOUNT and active_accounts:
            account = active_accounts[-1]
        yield index, event, account


def filter_pair_indices(
    events: Sequence[PlayEvent], application_id: int, account: int
) -> list[int]:
    """Return indices of the application events belonging to the pair."""
    return [
        index
        for index, event, owner in iter_attributed_events(events)
        if event.application_id == application_id and owner == account
    ]


def locate_sessions(events: Sequence[PlayEvent], indices: Sequence[int]) -> list[SessionSpan]:
    spans: list[SessionSpan] = []
    state = _State.CLOSED
    start_index: Optional[int] = None
    length = 0

    for index in indices:
        event = events[index]
        state, action = _TRANSITIONS[(state, event.sub_kind)]
        if action is _Action.OPEN:
            start_index, length = index, 1
        elif action is _Action.REOPEN:
            logger.debug(
                "Application %016x launched again at event %d without exiting; "
                "closing the previous session.",
                event.application_id,
                index,
            )
            spans.append(SessionSpan(start_index, length))
            start_index, length = index, 1
        elif start_index is None:
            logger.debug(
                "Ignoring %s for %016x at event %d outside of a session.",
                event.sub_kind.value,
                event.application_id,
                index,
            )
        else:
            length += 1
            if action is _Action.CLOSE:
                spans.append(SessionSpan(start_index, length))
                start_index, length = None, 0

    if start_index is not None:
        spans.append(SessionSpan(start_index, length))
    return spans


def build_session(
    events: Sequence[PlayEvent],
    indices: Sequence[int],
    span: SessionSpan,
    *,
    steady_ticks_per_second: int = 1,
) -> PlaySession:
    position = bisect_left(indices, span.start_index)
    run = [events[i] for i in indices[position : position + span.length]]
    interrupted = position + span.length < len(indices)

    launch = run[0]
    state = _State.CLOSED
    focus_start: Optional[PlayEvent] = None
    intervals: list[FocusInterval] = []

    def close_focus(until: PlayEvent) -> None:
        nonlocal focus_start
        if focus_start is None:
            return
        interval = _focus_interval(focus_start, until, steady_ticks_per_second)
        if interval.ticks:
            intervals.append(interval)
        focus_start = None

    def finish(end_timestamp: int, status: SessionStatus) -> PlaySession:
        return _session(launch, end_timestamp, status, intervals, steady_ticks_per_second)

    for event in run:
        state, action = _TRANSITIONS[(state, event.sub_kind)]
        if action in (_Action.OPEN, _Action.FOCUS_START):
            focus_start = event
        elif action is _Action.FOCUS_END:
            close_focus(event)
        elif action is _Action.CLOSE:
            close_focus(event)
            return finish(event.wall_timestamp, SessionStatus.EXITED)

    last = run[-1]
    if interrupted:
        close_focus(last)
        return finish(last.wall_timestamp, SessionStatus.INTERRUPTED)
    return finish(launch.wall_timestamp, SessionStatus.RUNNING)


def reconstruct_sessions(
    events: Sequence[PlayEvent],
    application_id: int,
    account: int,
    range_start: Optional[int] = None,
    range_end: Optional[int] = None,
    *,
    steady_ticks_per_second: int = 1,
) -> list[PlaySession]:
    """Return the sessions of ``application_id`` played by ``account``.

    When a range is given, only sessions that started within it are returned;
    sessions are never clipped here.
    """
    indices = filter_pair_indices(events, application_id, account)
    sessions: list[PlaySession] = []
    for span in locate_sessions(events, indices):
        session = build_session(
            events, indices, span, steady_ticks_per_second=steady_ticks_per_second
        )
        if range_start is not None and session.start_timestamp < range_start:
            continue
        if range_end is not None and session.start_timestamp > range_end:
            continue
        sessions.append(session)
    return sessions


def _focus_interval(
    gained: PlayEvent, lost: PlayEvent, steady_ticks_per_second: int
) -> FocusInterval:
    ticks = max(0, lost.steady_timestamp - gained.steady_timestamp)
    return FocusInterval(
        wall_start=gained.wall_timestamp,
        ticks=ticks,
        ticks_per_second=steady_ticks_per_second,
    )


def _session(
    launch: PlayEvent,
    end_timestamp: int,
    status: SessionStatus,
    intervals: list[FocusInterval],
    steady_ticks_per_second: int,
) -> PlaySession:
    ticks = sum(interval.ticks for interval in intervals)
    return PlaySession(
        playtime=ticks // steady_ticks_per_second,
        start_timestamp=launch.wall_timestamp,
        end_timestamp=end_timestamp,
        status=status,
        focus_intervals=tuple(intervals),
    )
