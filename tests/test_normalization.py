from __future__ import annotations

import pytest

from play_activity.normalization import (
    format_account_id,
    format_application_id,
    parse_account_id,
    parse_application_id,
)


@pytest.mark.parametrize("value", ["0100000000010000", "0x0100000000010000", " 0100000000010000 "])
def test_parse_application_id(value):
    assert parse_application_id(value) == 0x0100000000010000


def test_parse_account_id_accepts_dashes():
    assert parse_account_id("11111111-22222222-33333333-44444444") == (
        0x11111111_22222222_33333333_44444444
    )


@pytest.mark.parametrize("value", ["", "zz", "01000000000100001"])
def test_invalid_application_ids(value):
    with pytest.raises(ValueError):
        parse_application_id(value)


def test_formatting_pads_ids():
    assert format_application_id(0x1) == "0000000000000001"
    assert format_account_id(0xAB) == "0" * 30 + "ab"
