"""FastAPI application exposing the play history as a local JSON API."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .config import PlayLogSettings
from .history import HistoryNotLoadedError, PlayHistory, PlayHistoryStore
from .loader import LogCorruptError, LogLoadTimeout
from .models import PlaySession, RecentStatistics
from .normalization import (
    format_application_id,
    parse_account_id,
    parse_application_id,
)
from .paths import get_play_log_path
from .periods import ViewPeriod, period_bounds, shift_period

logger = logging.getLogger(__name__)


class FocusIntervalPayload(BaseModel):
    wall_start: int
    ticks: int
    seconds: float


class SessionPayload(BaseModel):
    playtime: int
    start_timestamp: int
    end_timestamp: int
    status: str
    is_open: bool
    focus_intervals: list[FocusIntervalPayload]

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_session(cls, session: PlaySession) -> "SessionPayload":
        return cls(
            playtime=session.playtime,
            start_timestamp=session.start_timestamp,
            end_timestamp=session.end_timestamp,
            status=session.status.value,
            is_open=session.is_open,
            focus_intervals=[
                FocusIntervalPayload(
                    wall_start=i.wall_start, ticks=i.ticks, seconds=i.seconds
                )
                for i in session.focus_intervals
            ],
        )


class RecentStatisticsPayload(BaseModel):
    application_id: str
    playtime: int
    launches: int

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_statistics(cls, stats: RecentStatistics) -> "RecentStatisticsPayload":
        return cls(
            application_id=format_application_id(stats.application_id),
            playtime=stats.playtime,
            launches=stats.launches,
        )


def create_app(
    *,
    log_path: Optional[Path] = None,
    settings: Optional[PlayLogSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_log_path = Path(log_path or get_play_log_path())
    resolved_settings = settings or PlayLogSettings()
    store = PlayHistoryStore(resolved_log_path, resolved_settings)

    app = FastAPI(title="Play Activity", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.history_store = store

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        try:
            store.reload()
        except (OSError, LogCorruptError, LogLoadTimeout):
            logger.exception("Failed to load play log %s", resolved_log_path)

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        history_store: PlayHistoryStore = request.app.state.history_store
        loaded = history_store.is_loaded()
        return {
            "log_path": str(history_store.log_path),
            "loaded": loaded,
            "event_count": len(history_store.current()) if loaded else 0,
            "steady_ticks_per_second": resolved_settings.steady_ticks_per_second,
            "format_version": resolved_settings.format_version,
        }

    @app.post("/api/reload")
    def reload(request: Request) -> Dict[str, Any]:
        history_store: PlayHistoryStore = request.app.state.history_store
        try:
            history = history_store.reload()
        except FileNotFoundError as exc:
            raise HTTPException(status_code=503, detail="Play log not found") from exc
        except (LogCorruptError, LogLoadTimeout) as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return {"loaded": True, "event_count": len(history)}

    @app.get("/api/titles")
    def titles(request: Request) -> Dict[str, Any]:
        history = _current_history(request)
        application_ids = sorted(history.logged_application_ids())
        return {
            "application_ids": [format_application_id(a) for a in application_ids],
        }

    @app.get("/api/sessions")
    def sessions(
        request: Request,
        application: str = Query(..., description="Application id in hex."),
        account: str = Query(..., description="Account UID in hex."),
        start: Optional[int] = Query(
            default=None, description="Earliest launch time (POSIX seconds)."
        ),
        end: Optional[int] = Query(
            default=None, description="Latest launch time (POSIX seconds)."
        ),
    ) -> Dict[str, Any]:
        application_id = _parse_id(parse_application_id, application)
        account_id = _parse_id(parse_account_id, account)
        history = _current_history(request)
        try:
            results = history.sessions_between(application_id, account_id, start, end)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        payload = [SessionPayload.from_session(s).model_dump() for s in results]
        return {
            "application_id": format_application_id(application_id),
            "sessions": payload,
            "total_playtime": sum(s.playtime for s in results),
        }

    @app.get("/api/recent")
    def recent(
        request: Request,
        account: str = Query(..., description="Account UID in hex."),
        period: ViewPeriod = Query(default=ViewPeriod.DAY),
        date: Optional[str] = Query(
            default=None,
            description="Date in YYYY-MM-DD format inside the period.",
        ),
        offset: int = Query(
            default=0, description="Whole periods to move from the date (negative for earlier)."
        ),
        start: Optional[int] = Query(
            default=None, description="Range start (POSIX seconds); overrides period."
        ),
        end: Optional[int] = Query(
            default=None, description="Range end (POSIX seconds); overrides period."
        ),
    ) -> Dict[str, Any]:
        account_id = _parse_id(parse_account_id, account)
        if start is not None and end is not None:
            range_start, range_end = start, end
        elif start is None and end is None:
            anchor = _parse_date(date)
            if offset:
                anchor = shift_period(anchor, period, offset)
            range_start, range_end = period_bounds(anchor, period)
        else:
            raise HTTPException(
                status_code=400, detail="start and end must be given together"
            )
        history = _current_history(request)
        try:
            stats = history.recent_statistics_for(account_id, range_start, range_end)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        entries = [
            RecentStatisticsPayload.from_statistics(s).model_dump()
            for s in sorted(stats.values(), key=lambda item: item.playtime, reverse=True)
        ]
        return {
            "start": range_start,
            "end": range_end,
            "entries": entries,
            "total_playtime": sum(s.playtime for s in stats.values()),
        }

    return app


def _current_history(request: Request) -> PlayHistory:
    try:
        return request.app.state.history_store.current()
    except HistoryNotLoadedError as exc:
        raise HTTPException(status_code=503, detail="Play log is not loaded") from exc


def _parse_id(parser, value: str) -> int:
    try:
        return parser(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _parse_date(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now()
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc
