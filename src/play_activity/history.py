"""Query entry point over a loaded play log."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Sequence

from .config import PlayLogSettings
from .loader import decode_log, load_log
from .models import PlayEvent, PlaySession, RecentStatistics
from .sessions import reconstruct_sessions
from .statistics import recent_statistics

logger = logging.getLogger(__name__)


class HistoryNotLoadedError(RuntimeError):
    """Raised when a store is queried before a log has been loaded."""


class PlayHistory:
    """Immutable snapshot of a decoded play log.

    Every query rescans the event tuple; results never reference it.
    """

    def __init__(
        self,
        events: Sequence[PlayEvent],
        settings: Optional[PlayLogSettings] = None,
    ) -> None:
        self._events = tuple(events)
        self._settings = settings or PlayLogSettings()

    @classmethod
    def from_bytes(
        cls, data: bytes, settings: Optional[PlayLogSettings] = None
    ) -> "PlayHistory":
        return cls(decode_log(data, settings), settings)

    @classmethod
    def from_path(
        cls, path: Path, settings: Optional[PlayLogSettings] = None
    ) -> "PlayHistory":
        return cls(load_log(path, settings), settings)

    def __len__(self) -> int:
        return len(self._events)

    def logged_application_ids(self) -> set[int]:
        """Every application id seen in the log, for any account."""
        return {event.application_id for event in self._events if event.is_application}

    def sessions_for(self, application_id: int, account: int) -> list[PlaySession]:
        return reconstruct_sessions(
            self._events,
            application_id,
            account,
            steady_ticks_per_second=self._settings.steady_ticks_per_second,
        )

    def sessions_between(
        self,
        application_id: int,
        account: int,
        range_start: Optional[int],
        range_end: Optional[int],
    ) -> list[PlaySession]:
        if range_start is not None and range_end is not None and range_end < range_start:
            raise ValueError("range end must not precede range start")
        return reconstruct_sessions(
            self._events,
            application_id,
            account,
            range_start,
            range_end,
            steady_ticks_per_second=self._settings.steady_ticks_per_second,
        )

    def recent_statistics_for(
        self, account: int, range_start: int, range_end: int
    ) -> dict[int, RecentStatistics]:
        return recent_statistics(
            self._events,
            account,
            range_start,
            range_end,
            steady_ticks_per_second=self._settings.steady_ticks_per_second,
        )


class PlayHistoryStore:
    """Hold the current ``PlayHistory`` for a log file and swap it on reload."""

    def __init__(self, log_path: Path, settings: Optional[PlayLogSettings] = None) -> None:
        self._log_path = Path(log_path)
        self._settings = settings or PlayLogSettings()
        self._lock = threading.Lock()
        self._reload_lock = threading.Lock()
        self._history: Optional[PlayHistory] = None

    @property
    def log_path(self) -> Path:
        return self._log_path

    def is_loaded(self) -> bool:
        with self._lock:
            return self._history is not None

    def current(self) -> PlayHistory:
        with self._lock:
            if self._history is None:
                raise HistoryNotLoadedError(
                    f"Play log {self._log_path} has not been loaded."
                )
            return self._history

    def reload(self) -> PlayHistory:
        """Decode the log into a new snapshot and make it current.

        Readers holding the previous snapshot keep using it. If decoding fails
        the previous snapshot stays current and the error propagates.
        """
        with self._reload_lock:
            history = PlayHistory.from_path(self._log_path, self._settings)
            with self._lock:
                self._history = history
        logger.info("Loaded %d play events from %s", len(history), self._log_path)
        return history
