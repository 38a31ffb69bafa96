"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .history import PlayHistory
from .models import PlaySession, RecentStatistics, SessionStatus
from .normalization import format_application_id

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S"


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, history: PlayHistory) -> None:
        self.history = history

    def print_titles(self) -> None:
        application_ids = sorted(self.history.logged_application_ids())
        if not application_ids:
            print("No applications found in the play log.")
            return
        print(f"{len(application_ids)} applications in the play log:")
        for application_id in application_ids:
            print(f"  {format_application_id(application_id)}")

    def print_sessions(self, application_id: int, account: int) -> None:
        sessions = self.history.sessions_for(application_id, account)
        if not sessions:
            print("No sessions recorded for the selected application and account.")
            return

        print(f"Sessions for {format_application_id(application_id)}")
        print("-" * 60)
        for session in sessions:
            print(f"  {describe_session(session)}")
        print()
        print(f"Total playtime: {format_duration(total_playtime(sessions))}")

    def print_recent(self, account: int, range_start: int, range_end: int) -> None:
        stats = self.history.recent_statistics_for(account, range_start, range_end)
        start = datetime.fromtimestamp(range_start).strftime(TIMESTAMP_FMT)
        end = datetime.fromtimestamp(range_end).strftime(TIMESTAMP_FMT)
        print(f"Activity from {start} to {end}")
        print("-" * 60)
        if not stats:
            print("No activity recorded for the selected period.")
            return

        entries = sort_by_playtime(stats.values())
        for entry in entries:
            print(
                f"  {format_application_id(entry.application_id):<18} "
                f"{format_duration(entry.playtime)}  "
                f"{entry.launches} launch{'es' if entry.launches != 1 else ''}"
            )
        print()
        print(f"Total playtime: {format_duration(sum(e.playtime for e in entries))}")


def describe_session(session: PlaySession) -> str:
    start = datetime.fromtimestamp(session.start_timestamp).strftime(TIMESTAMP_FMT)
    if session.is_open:
        end = "still running"
    else:
        end = datetime.fromtimestamp(session.end_timestamp).strftime(TIMESTAMP_FMT)
    label = f"{start} -> {end:<19}  {format_duration(session.playtime)}"
    if session.status is SessionStatus.INTERRUPTED:
        label += "  (no exit recorded)"
    return label


def total_playtime(sessions: Iterable[PlaySession]) -> int:
    return sum(session.playtime for session in sessions)


def sort_by_playtime(stats: Iterable[RecentStatistics]) -> list[RecentStatistics]:
    return sorted(
        stats, key=lambda item: (item.playtime, item.launches), reverse=True
    )


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
