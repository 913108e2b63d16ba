"""Shared pytest fixtures for finance-prices."""

import logging
from datetime import date, datetime

import pytest
import requests

from finprices.models import PriceRecord, TimeWindow


def make_response(body: str, status: int = 200) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body.encode("utf-8")
    r.encoding = "utf-8"
    r.url = "https://example.test/"
    return r


@pytest.fixture
def response():
    return make_response


@pytest.fixture
def window_2022() -> TimeWindow:
    return TimeWindow(start=datetime(2022, 1, 1), end=datetime(2022, 12, 31, 23, 59, 59))


@pytest.fixture
def records() -> list[PriceRecord]:
    return [
        PriceRecord(symbol="A", date=date(2022, 1, 2), price=1.0),
        PriceRecord(symbol="B", date=date(2022, 1, 2), price=2.0),
        PriceRecord(symbol="A", date=date(2022, 1, 1), price=3.0),
        PriceRecord(symbol="000001.JJ", date=date(2022, 1, 1), price=1.2345),
    ]


@pytest.fixture(autouse=True)
def _restore_logging():
    # the CLI reconfigures the root logger against CliRunner's streams
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
