"""Tests for the aggregator."""

from __future__ import annotations

from datetime import date, datetime
from unittest.mock import patch

import pytest

from finprices.aggregate import Aggregator
from finprices.models import PriceRecord, PriceSeries, TimeWindow
from finprices.providers.base import ErrorKind, Provider, ProviderError
from finprices.providers.registry import ProviderRegistry, register_all_providers


class FakeProvider(Provider):
    def __init__(self, name, suffix, price=1.0, skipped=0, fail=False):
        self.name = name
        self.suffix = suffix
        self.price = price
        self.skipped = skipped
        self.fail = fail
        self.calls = []

    def match(self, symbol):
        return symbol.endswith(self.suffix)

    def fetch_prices(self, symbol, window):
        self.calls.append(symbol)
        if self.fail:
            raise ProviderError(f"{self.name} down", ErrorKind.TRANSPORT, self.name, symbol)
        rec = PriceRecord(symbol=symbol, date=window.end.date(), price=self.price)
        return PriceSeries(records=(rec,), provider=self.name, symbol=symbol, skipped=self.skipped)


def _registry(*providers):
    reg = ProviderRegistry()
    for p in providers:
        reg.register(p.name, p)
    return reg.freeze()


@pytest.fixture
def window():
    return TimeWindow(start=datetime(2022, 1, 1), end=datetime(2022, 1, 10))


class TestAggregator:
    def test_requires_frozen_registry(self):
        with pytest.raises(ValueError, match="frozen"):
            Aggregator(ProviderRegistry())

    def test_unknown_symbols_yield_empty(self, window):
        with patch("requests.get") as get:
            report = Aggregator(register_all_providers()).collect(["AAPL", "MSFT"], window)
        get.assert_not_called()
        assert report.records == ()
        assert report.total_skipped == 0

    def test_no_symbols(self, window):
        assert Aggregator(_registry()).collect([], window).records == ()

    def test_routes_by_suffix(self, window):
        a, b = FakeProvider("a", ".A", 1.0), FakeProvider("b", ".B", 2.0)
        report = Aggregator(_registry(a, b)).collect(["X.A", "Y.B", "Z.C"], window)
        assert a.calls == ["X.A"]
        assert b.calls == ["Y.B"]
        assert sorted((r.symbol, r.price) for r in report.records) == [("X.A", 1.0), ("Y.B", 2.0)]

    def test_overlapping_providers_unioned(self, window):
        a, b = FakeProvider("a", "X", 1.0), FakeProvider("b", ".X", 2.0)
        report = Aggregator(_registry(a, b)).collect(["S.X"], window)
        assert [r.price for r in report.records] == [1.0, 2.0]

    def test_duplicate_symbols_fetched_once(self, window):
        a = FakeProvider("a", ".A")
        Aggregator(_registry(a)).collect(["X.A", "X.A"], window)
        assert a.calls == ["X.A"]

    def test_failure_aborts(self, window):
        a, b = FakeProvider("a", ".A"), FakeProvider("b", ".B", fail=True)
        with pytest.raises(ProviderError, match="b down"):
            Aggregator(_registry(a, b)).collect(["X.A", "Y.B"], window)

    def test_skip_counts_reported(self, window):
        a = FakeProvider("a", ".A", skipped=3)
        report = Aggregator(_registry(a)).collect(["X.A", "Y.A"], window)
        assert report.skipped == {("a", "X.A"): 3, ("a", "Y.A"): 3}
        assert report.total_skipped == 6

    def test_parallel_matches_sequential(self, window):
        symbols = [f"S{i}.A" for i in range(8)]
        seq = Aggregator(_registry(FakeProvider("a", ".A"))).collect(symbols, window)
        par = Aggregator(_registry(FakeProvider("a", ".A")), workers=4).collect(symbols, window)
        assert par.records == seq.records
        assert [r.symbol for r in par.records] == symbols

    def test_parallel_failure_propagates(self, window):
        a, b = FakeProvider("a", ".A"), FakeProvider("b", ".B", fail=True)
        with pytest.raises(ProviderError):
            Aggregator(_registry(a, b), workers=3).collect(["X.A", "Y.B", "Z.A"], window)

    def test_records_from_real_provider(self, response):
        body = 'var Data_netWorthTrend = [{"x":1641340800000,"y":1.5}];'
        window = TimeWindow(start=datetime(2022, 1, 1), end=datetime(2022, 1, 10))
        with patch("requests.get", return_value=response(body)):
            report = Aggregator(register_all_providers()).collect(["000001.JJ"], window)
        assert len(report.records) == 1
        assert report.records[0].symbol == "000001.JJ"
        assert report.records[0].date == date.fromtimestamp(1641340800)
