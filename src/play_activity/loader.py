"""Decode the binary play event log into ``PlayEvent`` records."""

from __future__ import annotations

import logging
import struct
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import PlayLogSettings
from .models import EventKind, EventSubKind, PlayEvent

logger = logging.getLogger(__name__)

RECORD_APPLET = 0
RECORD_ACCOUNT = 1
# Power state change, operation mode change and initialize records.
_IGNORED_RECORD_TYPES = frozenset({2, 3, 4})

LOG_POLICY_ALL = 0

_APPLET_EVENTS: dict[int, EventSubKind] = {
    0: EventSubKind.LAUNCH,
    1: EventSubKind.EXIT,
    2: EventSubKind.GAINED_FOCUS,
    3: EventSubKind.LOST_FOCUS,
    4: EventSubKind.LOST_FOCUS,
    5: EventSubKind.EXIT,
    6: EventSubKind.EXIT,
}

_ACCOUNT_EVENTS: dict[int, Optional[EventSubKind]] = {
    0: EventSubKind.ACCOUNT_ACTIVE,
    1: EventSubKind.ACCOUNT_INACTIVE,
    # Network service account became available/unavailable.
    2: None,
    3: None,
}

_DEADLINE_CHECK_EVERY = 1024


class LogCorruptError(ValueError):
    """Raised when a record in the play log cannot be decoded."""

    def __init__(self, record_index: int, reason: str) -> None:
        super().__init__(f"Corrupt play log record #{record_index}: {reason}")
        self.record_index = record_index
        self.reason = reason


class LogLoadTimeout(TimeoutError):
    """Raised when decoding does not finish before the configured deadline."""


@dataclass(frozen=True, slots=True)
class LogFormat:
    version: int
    record: struct.Struct

    @property
    def record_size(self) -> int:
        return self.record.size


# type, event code, log policy, pad, reserved, account uid, application id,
# user clock, network clock, steady clock
RECORD_V1 = struct.Struct("<BBBxI16sQQQQ")

LOG_FORMATS: dict[int, LogFormat] = {
    1: LogFormat(version=1, record=RECORD_V1),
}


def get_log_format(version: int) -> LogFormat:
    try:
        return LOG_FORMATS[version]
    except KeyError:
        raise ValueError(f"Unsupported play log format version: {version}") from None


def load_log(
    path: Path, settings: Optional[PlayLogSettings] = None
) -> tuple[PlayEvent, ...]:
    """Read and decode the play log at ``path``."""
    path = Path(path)
    data = path.read_bytes()
    logger.info("Read %d bytes from %s", len(data), path)
    return decode_log(data, settings)


def decode_log(
    data: bytes, settings: Optional[PlayLogSettings] = None
) -> tuple[PlayEvent, ...]:
    """Decode raw log bytes, preserving log order.

    The whole log is rejected if any record is malformed.
    """
    settings = settings or PlayLogSettings()
    log_format = get_log_format(settings.format_version)
    record_size = log_format.record_size

    deadline: Optional[float] = None
    if settings.load_timeout is not None:
        deadline = time.monotonic() + settings.load_timeout.total_seconds()

    total_records, remainder = divmod(len(data), record_size)
    if remainder:
        raise LogCorruptError(
            total_records,
            f"truncated record ({remainder} of {record_size} bytes)",
        )

    events: list[PlayEvent] = []
    skipped = 0
    for index, fields in enumerate(log_format.record.iter_unpack(data)):
        if deadline is not None and index % _DEADLINE_CHECK_EVERY == 0:
            if time.monotonic() > deadline:
                raise LogLoadTimeout(
                    f"Play log decoding exceeded {settings.load_timeout} "
                    f"after {index} of {total_records} records"
                )
        event = _decode_record(index, fields, settings)
        if event is None:
            skipped += 1
            continue
        events.append(event)

    logger.info(
        "Decoded %d play events (%d records skipped).", len(events), skipped
    )
    return tuple(events)


def _decode_record(
    index: int, fields: tuple, settings: PlayLogSettings
) -> Optional[PlayEvent]:
    (
        record_type,
        event_code,
        log_policy,
        _reserved,
        raw_account,
        application_id,
        user_clock,
        _network_clock,
        steady_clock,
    ) = fields
    account = int.from_bytes(raw_account, "little")

    if record_type == RECORD_APPLET:
        sub_kind = _APPLET_EVENTS.get(event_code)
        if sub_kind is None:
            raise LogCorruptError(index, f"unknown applet event code {event_code}")
        if log_policy != LOG_POLICY_ALL and not settings.include_unlogged_applets:
            return None
        return PlayEvent(
            kind=EventKind.APPLICATION,
            account=account,
            application_id=application_id,
            sub_kind=sub_kind,
            wall_timestamp=user_clock,
            steady_timestamp=steady_clock,
        )

    if record_type == RECORD_ACCOUNT:
        if event_code not in _ACCOUNT_EVENTS:
            raise LogCorruptError(index, f"unknown account event code {event_code}")
        sub_kind = _ACCOUNT_EVENTS[event_code]
        if sub_kind is None:
            return None
        return PlayEvent(
            kind=EventKind.ACCOUNT,
            account=account,
            application_id=0,
            sub_kind=sub_kind,
            wall_timestamp=user_clock,
            steady_timestamp=steady_clock,
        )

    if record_type in _IGNORED_RECORD_TYPES:
        return None

    raise LogCorruptError(index, f"unknown record type {record_type}")
