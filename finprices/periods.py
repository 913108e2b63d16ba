from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Callable, Dict, Optional

import pandas as pd

from .models import TimeWindow

logger = logging.getLogger(__name__)

# 2021-10-10-2022-10-10
_RANGE = re.compile(r"^(\d{4}-\d{2}-\d{2})-(\d{4}-\d{2}-\d{2})$")


class PeriodError(ValueError):
    pass


def _ytd(now: datetime) -> datetime:
    return datetime.combine(date(now.year, 1, 1), time.min)


def _back(**offset) -> Callable[[datetime], datetime]:
    def start(now: datetime) -> datetime:
        return (pd.Timestamp(now) - pd.DateOffset(**offset)).to_pydatetime()
    return start


PERIODS: Dict[str, Callable[[datetime], datetime]] = {
    "1D": _back(days=1),
    "5D": _back(days=5),
    "3M": _back(months=3),
    "6M": _back(months=6),
    "YTD": _ytd,
    "1Y": _back(years=1),
    "5Y": _back(years=5),
}


def parse_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise PeriodError(f"Invalid date {s}. Use YYYY-MM-DD") from e


def resolve_window(token: str, now: Optional[datetime] = None) -> TimeWindow:
    """Turn a period selector (1D, 5D, 3M, 6M, YTD, 1Y, 5Y or an explicit
    YYYY-MM-DD-YYYY-MM-DD range) into an inclusive window.

    Unknown tokens mean "from the beginning": the window starts at the epoch.
    """
    now = now or datetime.now()
    key = token.strip().upper()

    if key in PERIODS:
        return TimeWindow(start=PERIODS[key](now), end=now)

    m = _RANGE.match(key)
    if m:
        first, last = parse_date(m.group(1)), parse_date(m.group(2))
        if first > last:
            raise PeriodError(f"Time period {token} starts after it ends")
        return TimeWindow(
            start=datetime.combine(first, time.min),
            end=datetime.combine(last, time(23, 59, 59)),
        )

    logger.warning("Unrecognized time period %r, fetching full history", token)
    return TimeWindow(start=datetime.fromtimestamp(0), end=now)
