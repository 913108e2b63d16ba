from __future__ import annotations

import json
import logging
import math
import re
from datetime import date, datetime
from typing import List

from ..models import PriceRecord, PriceSeries, TimeWindow
from .base import ErrorKind, Provider, ProviderError, http_get

logger = logging.getLogger(__name__)

# Fund net-worth history, served as a script rather than JSON
# Example: https://fund.eastmoney.com/pingzhongdata/000001.js?v=20221014120000
EASTMONEY_JS = "https://fund.eastmoney.com/pingzhongdata/{code}.js"
FUND_SUFFIX = ".JJ"

_NET_WORTH = re.compile(r"var Data_netWorthTrend = (.+?);", re.DOTALL)


class EastMoneyProvider(Provider):
    name = "eastmoney"

    def match(self, symbol: str) -> bool:
        return symbol.endswith(FUND_SUFFIX)

    def fetch_prices(self, symbol: str, window: TimeWindow) -> PriceSeries:
        code = symbol[: -len(FUND_SUFFIX)]
        url = EASTMONEY_JS.format(code=code)
        r = http_get(url, self.name, symbol, params={"v": datetime.now().strftime("%Y%m%d%H%M%S")})
        return self.parse(symbol, r.text, window)

    def parse(self, symbol: str, body: str, window: TimeWindow) -> PriceSeries:
        m = _NET_WORTH.search(body)
        if m is None:
            logger.warning("EastMoney response for %s has no net worth trend", symbol)
            return self.empty(symbol)

        try:
            points = json.loads(m.group(1))
        except ValueError as e:
            raise ProviderError(
                f"EastMoney net worth trend parse failed for {symbol}: {e}",
                ErrorKind.MALFORMED_PAYLOAD, self.name, symbol,
            ) from e
        if not isinstance(points, list):
            raise ProviderError(
                f"EastMoney net worth trend for {symbol} is not a list",
                ErrorKind.MALFORMED_PAYLOAD, self.name, symbol,
            )

        records: List[PriceRecord] = []
        skipped = 0
        for p in points:
            try:
                sec = int(p["x"]) // 1000  # ms epoch
                price = float(p["y"])
            except (KeyError, TypeError, ValueError, OverflowError):
                skipped += 1
                continue
            if not math.isfinite(price):
                skipped += 1
                continue
            if not window.contains_ts(sec):
                continue
            records.append(PriceRecord(symbol=symbol, date=date.fromtimestamp(sec), price=price))

        if skipped:
            logger.info("EastMoney skipped %d malformed points for %s", skipped, symbol)
        return PriceSeries(records=tuple(records), provider=self.name, symbol=symbol, skipped=skipped)
