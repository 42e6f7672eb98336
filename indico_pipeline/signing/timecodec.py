"""Unix epoch <-> local time conversion.

The agenda server wants whole seconds since 1970-01-01T00:00:00Z in signed
requests. Local times are shifted with the process's *base* UTC offset (the
standard-time offset, ignoring DST), and the reverse conversion adds an hour
when the resulting wall time falls inside DST. The two directions therefore
only round-trip outside DST periods.
"""

import time
from datetime import datetime, timedelta, timezone

from indico_pipeline.exceptions import InvalidParameter

EPOCH = datetime(1970, 1, 1)
EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Sentinels for dates the agenda data leaves out
EPOCH_ZERO = EPOCH
EPOCH_ZERO_UTC = EPOCH_UTC


def base_utc_offset() -> timedelta:
    """Standard-time UTC offset of the local zone (DST not applied)."""
    # time.timezone is seconds *west* of UTC
    return timedelta(seconds=-time.timezone)


LOCAL_TZ = timezone(base_utc_offset(), "local")


def is_local_dst(wall: datetime) -> bool:
    """Check if a naive local wall time falls inside DST for the local zone."""
    stamp = time.mktime(wall.replace(tzinfo=None).timetuple()[:8] + (-1,))
    return time.localtime(stamp).tm_isdst > 0


def is_local(ts: datetime) -> bool:
    """Tagged with LOCAL_TZ, or with the fixed offset ``astimezone()`` attaches
    for the local zone (named after it, standard or DST)."""
    if ts.tzinfo is LOCAL_TZ:
        return True
    return isinstance(ts.tzinfo, timezone) and ts.tzinfo.tzname(None) in time.tzname


def to_epoch_seconds(ts: datetime) -> int:
    """Whole seconds since the Unix epoch.

    Naive datetimes are refused: there is no telling which zone they are in.
    Local datetimes (see is_local) are shifted by the base UTC offset; any
    other aware datetime is converted exactly.
    """
    if ts.tzinfo is None or ts.utcoffset() is None:
        raise InvalidParameter(
            "Don't know how to shift timezones for a datetime without tzinfo"
        )

    if is_local(ts):
        utc_wall = ts.replace(tzinfo=None) - base_utc_offset()
        return int((utc_wall - EPOCH).total_seconds())

    return int((ts - EPOCH_UTC).total_seconds())


def from_epoch_seconds(seconds: int) -> datetime:
    """Local wall time for a count of seconds since the Unix epoch."""
    local = EPOCH + timedelta(seconds=seconds) + base_utc_offset()
    if is_local_dst(local):
        local += timedelta(hours=1)
    return local.replace(tzinfo=LOCAL_TZ)


def now_epoch_seconds() -> int:
    """Current time as whole seconds since the epoch."""
    return to_epoch_seconds(datetime.now(timezone.utc))
