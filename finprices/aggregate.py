from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Tuple

from .models import FetchReport, PriceRecord, PriceSeries, TimeWindow
from .providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def _unique(symbols: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for s in symbols:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


class Aggregator:
    """Routes symbols to every matching provider and merges what comes back.

    Record order is unspecified here; rendering imposes the final order.
    A symbol requested more than once is fetched and reported once.
    Any provider failure aborts the whole collection.
    """

    def __init__(self, registry: ProviderRegistry, workers: int = 1):
        if not registry.frozen:
            raise ValueError("Aggregator needs a frozen provider registry")
        self.registry = registry
        self.workers = max(1, workers)

    def fetch_symbol(self, symbol: str, window: TimeWindow) -> List[PriceSeries]:
        out: List[PriceSeries] = []
        for provider in self.registry.providers_matching(symbol):
            series = provider.fetch_prices(symbol, window)
            logger.debug("%s returned %d records for %s", provider.name, len(series.records), symbol)
            out.append(series)
        if not out:
            logger.warning("No provider matches %s", symbol)
        return out

    def collect(self, symbols: Iterable[str], window: TimeWindow) -> FetchReport:
        symbols = _unique(symbols)
        if self.workers == 1 or len(symbols) <= 1:
            results = [self.fetch_symbol(s, window) for s in symbols]
        else:
            results = self._collect_parallel(symbols, window)

        records: List[PriceRecord] = []
        skipped: Dict[Tuple[str, str], int] = {}
        for per_symbol in results:
            for series in per_symbol:
                records.extend(series.records)
                if series.skipped:
                    skipped[(series.provider, series.symbol)] = series.skipped
        return FetchReport(records=tuple(records), skipped=skipped)

    def _collect_parallel(self, symbols: List[str], window: TimeWindow) -> List[List[PriceSeries]]:
        with ThreadPoolExecutor(max_workers=min(self.workers, len(symbols))) as executor:
            futures = [executor.submit(self.fetch_symbol, s, window) for s in symbols]
            try:
                return [f.result() for f in futures]
            except Exception:
                for f in futures:
                    f.cancel()
                raise
