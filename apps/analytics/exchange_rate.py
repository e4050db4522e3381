"""
Exchange rate client for the official USD to Bs. rate.

The rate is polled from a public JSON endpoint and kept in the Django cache
for ``EXCHANGE_RATE_TTL`` seconds. A failed fetch is cached as unknown for the
same window, so an unreachable source is retried at the next poll rather than
on every request.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

import httpx
import structlog
from django.conf import settings
from django.core.cache import cache

from .exceptions import ExchangeRateUnavailableError

logger = structlog.get_logger(__name__)

RATE_CACHE_KEY = 'analytics:exchange_rate:usd'
UNKNOWN_RATE = 'unknown'


def parse_rate(payload) -> Decimal:
    """
    Extract ``monitors.usd.price`` from the source payload.

    Raises:
        ExchangeRateUnavailableError: If the price is missing, not a number
            or not positive
    """
    try:
        price = payload['monitors']['usd']['price']
    except (KeyError, TypeError):
        raise ExchangeRateUnavailableError('Unexpected exchange rate response format')

    if isinstance(price, bool):
        raise ExchangeRateUnavailableError(f'Invalid exchange rate: {price!r}')

    try:
        rate = Decimal(str(price))
    except InvalidOperation:
        raise ExchangeRateUnavailableError(f'Invalid exchange rate: {price!r}')

    if not rate.is_finite() or rate <= 0:
        raise ExchangeRateUnavailableError(f'Invalid exchange rate: {price!r}')

    return rate


class ExchangeRateClient:
    """
    Synchronous client for the exchange rate source.

    Attributes:
        url: Endpoint returning ``{"monitors": {"usd": {"price": ...}}}``
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass a MockTransport)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url or settings.EXCHANGE_RATE_URL
        self.timeout = timeout or settings.EXCHANGE_RATE_TIMEOUT
        self.transport = transport

    def fetch_rate(self) -> Decimal:
        """
        Fetch the current rate.

        Raises:
            ExchangeRateUnavailableError: On transport errors, non-2xx status
                or a malformed payload
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ExchangeRateUnavailableError(
                f'Exchange rate source returned {e.response.status_code}'
            ) from e
        except httpx.HTTPError as e:
            raise ExchangeRateUnavailableError(f'Exchange rate request failed: {e}') from e
        except ValueError as e:
            raise ExchangeRateUnavailableError('Exchange rate response is not JSON') from e

        return parse_rate(payload)


def get_exchange_rate(
    *,
    force_refresh: bool = False,
    client: Optional[ExchangeRateClient] = None,
) -> Optional[Decimal]:
    """
    Current USD to Bs. rate, or ``None`` when it is unknown.

    Args:
        force_refresh: Skip the cache and fetch now (the hourly poll)
        client: Client to fetch with, defaults to one built from settings

    Returns:
        The cached or freshly fetched rate; ``None`` if the last fetch failed
    """
    if not force_refresh:
        cached = cache.get(RATE_CACHE_KEY)
        if cached is not None:
            return None if cached == UNKNOWN_RATE else Decimal(cached)

    client = client or ExchangeRateClient()
    try:
        rate = client.fetch_rate()
    except ExchangeRateUnavailableError as e:
        logger.warning('exchange_rate_unavailable', url=client.url, error=str(e))
        cache.set(RATE_CACHE_KEY, UNKNOWN_RATE, settings.EXCHANGE_RATE_TTL)
        return None

    cache.set(RATE_CACHE_KEY, str(rate), settings.EXCHANGE_RATE_TTL)
    logger.info('exchange_rate_refreshed', rate=str(rate))
    return rate
