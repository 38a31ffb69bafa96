"""Configuration models and helpers for reading the play log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(slots=True)
class PlayLogSettings:
    """Runtime configuration for decoding and interpreting the play log."""

    steady_ticks_per_second: int = 1
    include_unlogged_applets: bool = False
    format_version: int = 1
    load_timeout: Optional[timedelta] = timedelta(seconds=30)

    def __post_init__(self) -> None:
        if self.steady_ticks_per_second < 1:
            raise ValueError("steady_ticks_per_second must be at least 1")

    @classmethod
    def from_options(
        cls,
        steady_ticks_per_second: int = 1,
        include_unlogged_applets: bool = False,
        timeout_seconds: float | None = None,
    ) -> "PlayLogSettings":
        load_timeout = (
            timedelta(seconds=timeout_seconds)
            if timeout_seconds is not None and timeout_seconds > 0
            else None
        )
        return cls(
            steady_ticks_per_second=steady_ticks_per_second,
            include_unlogged_applets=include_unlogged_applets,
            load_timeout=load_timeout,
        )
