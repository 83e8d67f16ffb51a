# careshift_project_root/data_processing/aggregation.py
# WEEKLY EVENT AGGREGATION FOR CHARTING

"""
Filters timestamped resident events (incidents or activities) and buckets
them into ISO calendar weeks, Monday through Sunday.

All functions are pure: they never mutate their inputs, and an empty or
unmatched input still yields a complete, zero-filled week series.
"""

import logging
from datetime import date, timedelta
from typing import Any, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict

from config import settings
from .helpers import normalize_category, to_facility_timestamp

logger = logging.getLogger(__name__)


class WeekBucket(BaseModel):
    """One ISO week of a chart series. Both dates are inclusive."""
    model_config = ConfigDict(frozen=True)

    week_label: str
    count: int
    start_date: date
    end_date: date


def _local_days(timestamps: pd.Series) -> pd.Series:
    """Facility-local calendar day (naive midnight) of each timestamp; NaT stays NaT."""
    ts = pd.to_datetime(timestamps, errors='coerce', utc=True, format='ISO8601')
    return ts.dt.tz_convert(settings.FACILITY_TIMEZONE).dt.tz_localize(None).dt.normalize()


def _local_day(value: Any) -> date:
    return to_facility_timestamp(value).date()


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _week_label(week_start: date) -> str:
    # The end day is the bare day-of-month even when the week crosses into
    # the next month ("Apr 28-4").
    week_end = week_start + timedelta(days=6)
    return f"{week_start.strftime('%b')} {week_start.day}-{week_end.day}"


def filter_events(
    events: pd.DataFrame,
    resident_id: str,
    type_label: str,
    range_start: Any,
    range_end: Any
) -> pd.DataFrame:
    """
    Keeps events for `resident_id` whose type matches `type_label`
    (case-insensitive, whitespace-trimmed) and whose calendar day lies within
    [day(range_start), day(range_end)], both days inclusive.

    Events with unparseable timestamps never match.
    """
    if not isinstance(events, pd.DataFrame) or events.empty:
        return pd.DataFrame(columns=getattr(events, 'columns', []))

    type_keys = events['type_key'] if 'type_key' in events.columns else normalize_category(events['type'])
    event_days = _local_days(events['timestamp'])
    start_day = pd.Timestamp(_local_day(range_start))
    end_day = pd.Timestamp(_local_day(range_end))

    mask = (
        (events['resident_id'].astype(str) == str(resident_id))
        & (type_keys == normalize_category(type_label))
        & event_days.between(start_day, end_day, inclusive='both')
    )
    return events.loc[mask.fillna(False).astype(bool)].copy()


def aggregate_by_week(events: Optional[pd.DataFrame], range_start: Any, range_end: Any) -> List[WeekBucket]:
    """
    Counts events per ISO week over the weeks intersecting
    [range_start, range_end].

    Every week in range gets a bucket, starting at zero. Events that fall in
    a week outside the generated set are ignored.
    """
    first_week = _week_start(_local_day(range_start))
    last_week = _week_start(_local_day(range_end))

    week_starts: List[date] = []
    current = first_week
    while current <= last_week:
        week_starts.append(current)
        current += timedelta(weeks=1)

    counts = pd.Series(dtype='int64')
    if isinstance(events, pd.DataFrame) and not events.empty:
        event_weeks = _local_days(events['timestamp']).dropna().map(lambda d: _week_start(d.date()))
        counts = event_weeks.value_counts()
        ignored = int(counts[~counts.index.isin(week_starts)].sum())
        if ignored:
            logger.debug(f"Ignored {ignored} event(s) outside the weeks {first_week} to {last_week}.")

    return [
        WeekBucket(
            week_label=_week_label(week_start),
            count=int(counts.get(week_start, 0)),
            start_date=week_start,
            end_date=week_start + timedelta(days=6),
        )
        for week_start in week_starts
    ]


def weekly_series_for_subject(
    events: pd.DataFrame,
    resident_id: str,
    event_type: str,
    lookback_days: int,
    now: Any = None
) -> List[WeekBucket]:
    """
    Weekly counts of `event_type` for one resident over the last
    `lookback_days` days, today included.

    The range ends at `now` and starts at local midnight `lookback_days - 1`
    calendar days earlier. An unknown resident yields the full zero-count series.

    Raises:
        ValueError: if `lookback_days` is not a positive integer.
    """
    if isinstance(lookback_days, bool) or not isinstance(lookback_days, int) or lookback_days <= 0:
        raise ValueError(f"lookback_days must be a positive integer, got {lookback_days!r}")

    range_end = to_facility_timestamp(now if now is not None else pd.Timestamp.now(tz='UTC'))
    # Calendar-day arithmetic; 24h steps drift by a day across DST changes.
    start_day = range_end.date() - timedelta(days=lookback_days - 1)
    range_start = pd.Timestamp(start_day).tz_localize(range_end.tz, nonexistent='shift_forward')

    matched = filter_events(events, resident_id, event_type, range_start, range_end)
    series = aggregate_by_week(matched, range_start, range_end)
    logger.info(
        f"Weekly '{event_type}' series for {resident_id}: {len(matched)} event(s) across {len(series)} week(s)."
    )
    return series
