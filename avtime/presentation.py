""" Presentation policy """

from typing import List, Literal, Tuple
from datetime import datetime

import avtime

Severity = Literal['nominal', 'caution', 'warning', 'critical']
Freshness = Literal['fresh', 'stale']

# Upper bounds (inclusive) of each severity band, any larger value is `critical`
OFFSET_THRESHOLDS: List[Tuple[int, Severity]] = [
    (10, 'nominal'),  # [ms]
    (50, 'caution'),
    (100, 'warning'),
]
FRESHNESS_THRESHOLDS: List[Tuple[int, Severity]] = [
    (5, 'nominal'),  # [sec.]
    (15, 'caution'),
    (avtime.STALE_THRESHOLD, 'warning'),
]


def classify(value: float, thresholds: List[Tuple[int, Severity]]) -> Severity:
    """ Returns the severity of the first band whose upper bound is not exceeded by `value`.

    Parameters
    ----------
    value: `float`
        The non-negative value to classify.
    thresholds: `List[Tuple[int, Severity]]`
        The ascending (upper bound, severity) bands.
    """
    for limit, severity in thresholds:
        if value <= limit:
            return severity
    return 'critical'


def offset_severity(offset: int) -> Severity:
    """ Returns the severity of the offset magnitude in milliseconds. """
    return classify(abs(offset), OFFSET_THRESHOLDS)


def freshness_severity(seconds_since_sync: int) -> Severity:
    """ Returns the severity of the time in seconds since the last synchronization. """
    return classify(seconds_since_sync, FRESHNESS_THRESHOLDS)


def freshness(seconds_since_sync: int) -> Freshness:
    """ Returns `fresh` until the synchronization is older than `avtime.STALE_THRESHOLD`. """
    return 'fresh' if seconds_since_sync <= avtime.STALE_THRESHOLD else 'stale'


def gauge_ratio(seconds_since_sync: int) -> float:
    """ Returns the fill ratio of the freshness gauge, decaying linearly from 1.0 right after a
    synchronization to 0.0 at `avtime.STALE_THRESHOLD` seconds and later.
    """
    age = min(max(seconds_since_sync, 0), avtime.STALE_THRESHOLD)
    return 1 - age / avtime.STALE_THRESHOLD


def next_sync_in(seconds_since_sync: int, interval: float = avtime.SYNC_INTERVAL) -> int:
    """ Returns the whole seconds until the next scheduled synchronization. """
    interval = max(int(interval), 1)
    return interval - (seconds_since_sync % interval)


def format_offset(offset: int) -> str:
    """ Returns the offset in milliseconds with an explicit sign, e.g. `+37 ms`. """
    return '%+d ms' % offset


def format_date(time_: datetime) -> str:
    """ Returns the calendar date, e.g. `Saturday, October 17, 2026`. """
    return time_.strftime('%A, %B %d, %Y')


def format_time(time_: datetime) -> str:
    """ Returns the clock time with milliseconds, e.g. `21:13:07.042`. """
    return '%s.%03d' % (time_.strftime('%H:%M:%S'), time_.microsecond // 1000)


def format_timestamp(time_: datetime) -> str:
    """ Returns the calendar date and the clock time, e.g. `2026-10-17 21:13:07.042`. """
    return '%s %s' % (time_.strftime('%Y-%m-%d'), format_time(time_))
