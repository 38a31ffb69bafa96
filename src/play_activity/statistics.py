"""Aggregate per-application playtime and launch counts over a time range."""

from __future__ import annotations

from typing import Sequence

from .models import PlayEvent, PlaySession, RecentStatistics
from .sessions import iter_attributed_events, reconstruct_sessions


def recent_statistics(
    events: Sequence[PlayEvent],
    account: int,
    range_start: int,
    range_end: int,
    *,
    steady_ticks_per_second: int = 1,
) -> dict[int, RecentStatistics]:
    """Return statistics keyed by application id for ``account``.

    Launches count sessions that started inside ``[range_start, range_end]``.
    Playtime only counts the part of each focus interval inside the range, so a
    session that straddles a boundary contributes its in-range share.
    """
    if range_end < range_start:
        raise ValueError("range end must not precede range start")

    application_ids = _applications_for_account(events, account)
    results: dict[int, RecentStatistics] = {}
    for application_id in application_ids:
        sessions = reconstruct_sessions(
            events,
            application_id,
            account,
            steady_ticks_per_second=steady_ticks_per_second,
        )
        ticks = 0
        launches = 0
        counted = False
        for session in sessions:
            launched = range_start <= session.start_timestamp <= range_end
            overlap = clipped_ticks(session, range_start, range_end)
            if not launched and not overlap:
                continue
            counted = True
            launches += 1 if launched else 0
            ticks += overlap
        if counted:
            results[application_id] = RecentStatistics(
                application_id=application_id,
                playtime=ticks // steady_ticks_per_second,
                launches=launches,
            )
    return results


def clipped_ticks(session: PlaySession, range_start: int, range_end: int) -> int:
    """Steady ticks of the session's focus inside the inclusive range.

    The range covers whole seconds, so ``range_end`` itself counts in full.
    """
    return sum(
        interval.overlap_ticks(range_start, range_end)
        for interval in session.focus_intervals
    )


def _applications_for_account(events: Sequence[PlayEvent], account: int) -> list[int]:
    # dict keeps first-seen order so results are stable across runs
    seen: dict[int, None] = {}
    for _, event, owner in iter_attributed_events(events):
        if owner == account:
            seen.setdefault(event.application_id, None)
    return list(seen)
