from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Tuple


@dataclass(frozen=True)
class PriceRecord:
    symbol: str     # as requested, never the upstream code
    date: date
    price: float


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    @property
    def from_ts(self) -> int:
        return int(self.start.timestamp())

    @property
    def to_ts(self) -> int:
        return int(self.end.timestamp())

    def contains_ts(self, sec: int) -> bool:
        return self.from_ts <= sec <= self.to_ts

    def contains_date(self, d: date) -> bool:
        return self.start.date() <= d <= self.end.date()


@dataclass(frozen=True)
class PriceSeries:
    records: Tuple[PriceRecord, ...]
    provider: str
    symbol: str
    skipped: int = 0   # rows dropped for bad date/price


@dataclass(frozen=True)
class FetchReport:
    records: Tuple[PriceRecord, ...] = ()
    skipped: Dict[Tuple[str, str], int] = field(default_factory=dict)

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())
