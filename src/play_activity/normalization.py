"""Utilities to parse and format application ids and account UIDs."""

from __future__ import annotations

import re

_APPLICATION_ID_PATTERN = re.compile(r"^(?:0x)?([0-9a-f]{1,16})$", re.IGNORECASE)
_ACCOUNT_ID_PATTERN = re.compile(r"^(?:0x)?([0-9a-f]{1,32})$", re.IGNORECASE)


def parse_application_id(value: str) -> int:
    """Parse a hexadecimal application id such as ``0100000000010000``."""
    match = _APPLICATION_ID_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid application id: {value!r}")
    return int(match.group(1), 16)


def parse_account_id(value: str) -> int:
    """Parse an account UID written as 32 hex digits, dashes allowed."""
    cleaned = value.strip().replace("-", "")
    match = _ACCOUNT_ID_PATTERN.match(cleaned)
    if not match:
        raise ValueError(f"Invalid account id: {value!r}")
    return int(match.group(1), 16)


def format_application_id(application_id: int) -> str:
    return f"{application_id:016X}"


def format_account_id(account: int) -> str:
    return f"{account:032x}"
