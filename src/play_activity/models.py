"""Domain models for decoded play events and derived results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


NO_ACCOUNT = 0


class EventKind(Enum):
    APPLICATION = "application"
    ACCOUNT = "account"


class EventSubKind(Enum):
    LAUNCH = "launch"
    EXIT = "exit"
    GAINED_FOCUS = "gained_focus"
    LOST_FOCUS = "lost_focus"
    ACCOUNT_ACTIVE = "account_active"
    ACCOUNT_INACTIVE = "account_inactive"


class SessionStatus(Enum):
    EXITED = "exited"
    INTERRUPTED = "interrupted"
    RUNNING = "running"


@dataclass(frozen=True, slots=True)
class PlayEvent:
    """A single decoded record from the play log."""

    kind: EventKind
    account: int
    application_id: int
    sub_kind: EventSubKind
    wall_timestamp: int
    steady_timestamp: int

    @property
    def is_application(self) -> bool:
        return self.kind is EventKind.APPLICATION


@dataclass(frozen=True, slots=True)
class FocusInterval:
    """Time an application held focus, anchored at the wall time it began.

    The length is kept in steady clock ticks so that sums over many short
    intervals are converted to seconds only once.
    """

    wall_start: int
    ticks: int
    ticks_per_second: int = 1

    @property
    def seconds(self) -> float:
        return self.ticks / self.ticks_per_second

    def overlap_ticks(self, range_start: int, range_end: int) -> int:
        """Ticks of this interval inside the inclusive second range."""
        lower = max(0, (range_start - self.wall_start) * self.ticks_per_second)
        upper = min(self.ticks, (range_end + 1 - self.wall_start) * self.ticks_per_second)
        return max(0, upper - lower)


@dataclass(frozen=True, slots=True)
class PlaySession:
    """One launch-to-exit lifetime of an application for one account.

    ``playtime`` only counts focused time, so it is usually shorter than
    ``end_timestamp - start_timestamp``. A session still open at the end of the
    log has ``end_timestamp == start_timestamp`` and ``status == RUNNING``.
    """

    playtime: int
    start_timestamp: int
    end_timestamp: int
    status: SessionStatus = SessionStatus.EXITED
    focus_intervals: tuple[FocusInterval, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.status is SessionStatus.RUNNING


@dataclass(frozen=True, slots=True)
class RecentStatistics:
    """Playtime and launch totals for one application within a time range."""

    application_id: int
    playtime: int
    launches: int
