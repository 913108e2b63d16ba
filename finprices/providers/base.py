from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Dict, Optional

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..models import PriceSeries, TimeWindow
from ..settings import settings

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    MALFORMED_PAYLOAD = "malformed_payload"


class ProviderError(RuntimeError):
    def __init__(self, message: str, kind: ErrorKind, provider: str = "", symbol: str = ""):
        super().__init__(message)
        self.kind = kind
        self.provider = provider
        self.symbol = symbol


class Provider:
    name: str

    def match(self, symbol: str) -> bool:
        raise NotImplementedError

    def fetch_prices(self, symbol: str, window: TimeWindow) -> PriceSeries:
        raise NotImplementedError

    def empty(self, symbol: str) -> PriceSeries:
        return PriceSeries(records=(), provider=self.name, symbol=symbol)


def http_get(url: str, provider: str, symbol: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
    """One GET against an upstream.

    Transport failures are retried only when FINPRICES_MAX_ATTEMPTS > 1.
    """
    retrying = Retrying(
        reraise=True,
        stop=stop_after_attempt(max(1, settings.max_attempts)),
        wait=wait_exponential(multiplier=1.0, min=1, max=12),
        retry=retry_if_exception_type((requests.Timeout, requests.ConnectionError)),
    )
    logger.debug("%s GET %s params=%s", provider, url, params)
    try:
        r = retrying(
            requests.get,
            url,
            params=params,
            headers={"User-Agent": settings.user_agent},
            timeout=settings.http_timeout,
        )
    except requests.RequestException as e:
        raise ProviderError(
            f"{provider} download failed for {symbol}: {e}", ErrorKind.TRANSPORT, provider, symbol
        ) from e

    try:
        r.raise_for_status()
    except requests.HTTPError as e:
        raise ProviderError(
            f"{provider} returned HTTP {r.status_code} for {symbol}", ErrorKind.HTTP_STATUS, provider, symbol
        ) from e
    return r
