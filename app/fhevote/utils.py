"""
Utilities for FHE votes.

19-10-2026
"""

import json
import re
import time

from datetime import datetime

import pytz

from app.config import TIMEZONE

# -- JSON manipulation --


def to_json(d: dict):
    return json.dumps(d, sort_keys=True)


# -- Vote input --

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_count(value) -> int:
    """
    Reads a vote count the way a browser's parseInt would: the leading
    integer of the text wins, anything unparseable counts as 0 and a
    negative count is clamped to 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(value, 0)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return 0
    return max(int(match.group(1)), 0)


def is_blank(value) -> bool:
    return value is None or str(value).strip() == ""


def make_vote_id(millis: int | None = None) -> str:
    return "vote-{0}".format(now_millis() if millis is None else millis)


# -- Datetime --


def tz_now():
    tz = pytz.timezone(TIMEZONE)
    return datetime.now(tz)


def now_seconds() -> int:
    return int(time.time())


def now_millis() -> int:
    return int(time.time() * 1000)
