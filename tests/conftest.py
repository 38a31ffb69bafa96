from __future__ import annotations

from pathlib import Path

import pytest

from play_activity.loader import RECORD_ACCOUNT, RECORD_APPLET, RECORD_V1
from play_activity.models import EventKind, EventSubKind, PlayEvent

ACCOUNT_A = 0x11111111_22222222_33333333_44444444
ACCOUNT_B = 0xAAAAAAAA_BBBBBBBB_CCCCCCCC_DDDDDDDD
GAME = 0x0100000000010000
OTHER_GAME = 0x01006A800016E000

APPLET_CODES = {
    EventSubKind.LAUNCH: 0,
    EventSubKind.EXIT: 1,
    EventSubKind.GAINED_FOCUS: 2,
    EventSubKind.LOST_FOCUS: 3,
}
ACCOUNT_CODES = {
    EventSubKind.ACCOUNT_ACTIVE: 0,
    EventSubKind.ACCOUNT_INACTIVE: 1,
}


def pack_record(
    record_type: int,
    event_code: int,
    *,
    account: int = 0,
    application_id: int = 0,
    wall: int = 0,
    steady: int = 0,
    log_policy: int = 0,
) -> bytes:
    return RECORD_V1.pack(
        record_type,
        event_code,
        log_policy,
        0,
        account.to_bytes(16, "little"),
        application_id,
        wall,
        wall,
        steady,
    )


def encode_events(events: list[PlayEvent]) -> bytes:
    chunks = []
    for event in events:
        if event.kind is EventKind.APPLICATION:
            chunks.append(
                pack_record(
                    RECORD_APPLET,
                    APPLET_CODES[event.sub_kind],
                    account=event.account,
                    application_id=event.application_id,
                    wall=event.wall_timestamp,
                    steady=event.steady_timestamp,
                )
            )
        else:
            chunks.append(
                pack_record(
                    RECORD_ACCOUNT,
                    ACCOUNT_CODES[event.sub_kind],
                    account=event.account,
                    wall=event.wall_timestamp,
                    steady=event.steady_timestamp,
                )
            )
    return b"".join(chunks)


def app_event(
    sub_kind: EventSubKind,
    *,
    wall: int,
    steady: int | None = None,
    account: int = ACCOUNT_A,
    application_id: int = GAME,
) -> PlayEvent:
    return PlayEvent(
        kind=EventKind.APPLICATION,
        account=account,
        application_id=application_id,
        sub_kind=sub_kind,
        wall_timestamp=wall,
        steady_timestamp=wall if steady is None else steady,
    )


def account_event(
    sub_kind: EventSubKind, *, account: int, wall: int, steady: int | None = None
) -> PlayEvent:
    return PlayEvent(
        kind=EventKind.ACCOUNT,
        account=account,
        application_id=0,
        sub_kind=sub_kind,
        wall_timestamp=wall,
        steady_timestamp=wall if steady is None else steady,
    )


@pytest.fixture
def focused_session() -> list[PlayEvent]:
    return [
        app_event(EventSubKind.LAUNCH, wall=1000),
        app_event(EventSubKind.GAINED_FOCUS, wall=1000),
        app_event(EventSubKind.LOST_FOCUS, wall=1500),
        app_event(EventSubKind.EXIT, wall=1600),
    ]


@pytest.fixture
def log_file(tmp_path: Path, focused_session: list[PlayEvent]) -> Path:
    path = tmp_path / "PlayEvent.dat"
    path.write_bytes(encode_events(focused_session))
    return path
