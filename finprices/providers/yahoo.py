from __future__ import annotations

import logging
from io import StringIO
from typing import List

import pandas as pd

from ..models import PriceRecord, PriceSeries, TimeWindow
from .base import ErrorKind, Provider, ProviderError, http_get

logger = logging.getLogger(__name__)

# Example: https://query1.finance.yahoo.com/v7/finance/download/000151.SZ?period1=1634204059&period2=1665740059&interval=1d&events=history&includeAdjustedClose=true
YAHOO_CSV = "https://query1.finance.yahoo.com/v7/finance/download/{code}"

SUFFIXES = (".SS", ".SH", ".SZ")
# Shanghai is .SS upstream, .SH everywhere else
ALIASES = {".SH": ".SS"}


def upstream_code(symbol: str) -> str:
    for alias, canonical in ALIASES.items():
        if symbol.endswith(alias):
            return symbol[: -len(alias)] + canonical
    return symbol


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class YahooProvider(Provider):
    name = "yahoo"

    def match(self, symbol: str) -> bool:
        return symbol.endswith(SUFFIXES)

    def fetch_prices(self, symbol: str, window: TimeWindow) -> PriceSeries:
        params = {
            "period1": str(window.from_ts),
            "period2": str(window.to_ts),
            "interval": "1d",
            "events": "history",
            "includeAdjustedClose": "true",
        }
        r = http_get(YAHOO_CSV.format(code=upstream_code(symbol)), self.name, symbol, params=params)
        return self.parse(symbol, r.text, window)

    def parse(self, symbol: str, body: str, window: TimeWindow) -> PriceSeries:
        if not body.strip():
            logger.warning("Yahoo returned an empty body for %s", symbol)
            return self.empty(symbol)

        bad_lines: List[List[str]] = []
        try:
            df = pd.read_csv(
                StringIO(body),
                dtype=str,
                skipinitialspace=True,
                index_col=False,  # trailing delimiters must not shift columns
                engine="python",
                on_bad_lines=lambda line: bad_lines.append(line),  # returns None, row dropped
            )
        except Exception as e:
            raise ProviderError(
                f"Yahoo CSV parse failed for {symbol}: {e}",
                ErrorKind.MALFORMED_PAYLOAD, self.name, symbol,
            ) from e

        # an unterminated quote swallows the lines after it
        lines = sum(1 for line in body.splitlines() if line.strip()) - 1
        if len(df) + len(bad_lines) != lines:
            raise ProviderError(
                f"Yahoo CSV for {symbol} has {lines} data lines but {len(df) + len(bad_lines)} rows",
                ErrorKind.MALFORMED_PAYLOAD, self.name, symbol,
            )

        df.columns = [str(c).strip() for c in df.columns]
        if "Date" not in df.columns or "Close" not in df.columns:
            logger.warning("Yahoo CSV for %s missing Date/Close: cols=%s", symbol, list(df.columns))
            return self.empty(symbol)

        dates = pd.to_datetime(df["Date"].map(_strip), format="%Y-%m-%d", errors="coerce")
        prices = pd.to_numeric(df["Close"].map(_strip), errors="coerce")
        ok = dates.notna() & prices.notna() & (prices.abs() != float("inf"))
        skipped = int((~ok).sum()) + len(bad_lines)

        records = []
        for d, p in zip(dates[ok].dt.date, prices[ok]):
            if not window.contains_date(d):
                continue
            records.append(PriceRecord(symbol=symbol, date=d, price=float(p)))

        if skipped:
            logger.info("Yahoo skipped %d unparseable rows for %s", skipped, symbol)
        return PriceSeries(records=tuple(records), provider=self.name, symbol=symbol, skipped=skipped)
