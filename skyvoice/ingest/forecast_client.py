"""Pirate Weather forecast API client with retry and rate limit handling."""

import asyncio
import logging

import httpx

from skyvoice.config.credentials import MissingSecretError, forecast_api_key
from skyvoice.models.forecast import ForecastPayload

logger = logging.getLogger(__name__)

FORECAST_BASE_URL = "https://api.pirateweather.net"
DEFAULT_USER_AGENT = "skyvoice/0.1.0"
RETRY_STATUS_CODES = (429, 503)


class ForecastClientError(Exception):
    """Raised when the forecast provider cannot be reached or errors out."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ForecastClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = FORECAST_BASE_URL,
        exclude: str = "hrrr",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 2.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.exclude = exclude
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.user_agent = user_agent

    @property
    def api_key(self) -> str:
        # Resolved lazily so a missing key only fails the first fetch.
        if not self._api_key:
            self._api_key = forecast_api_key()
        return self._api_key

    async def get_forecast(self, latitude: float, longitude: float) -> ForecastPayload:
        """Fetch the forecast payload for a coordinate pair.

        Retries on 503/429 and transport errors with exponential backoff.
        """
        try:
            key = self.api_key
        except MissingSecretError as e:
            raise ForecastClientError(str(e)) from e

        url = f"{self.base_url}/forecast/{key}/{latitude},{longitude}"
        params = {"exclude": self.exclude} if self.exclude else None
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    resp = await client.get(url, params=params, headers=headers)
                except httpx.RequestError as e:
                    if attempt < self.max_retries:
                        delay = self.retry_base_delay * (2**attempt)
                        logger.warning(
                            "Forecast request error, retrying in %.1fs: %s", delay, e
                        )
                        await asyncio.sleep(delay)
                        continue
                    raise ForecastClientError(f"Request failed: {e}") from e

                if resp.status_code in RETRY_STATUS_CODES and attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Forecast API returned %d, retrying in %.1fs (attempt %d/%d)",
                        resp.status_code, delay, attempt + 1, self.max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                if resp.status_code >= 400:
                    logger.error(
                        "Forecast API %d for %s,%s", resp.status_code, latitude, longitude
                    )
                    raise ForecastClientError(
                        f"HTTP {resp.status_code}", resp.status_code
                    )
                try:
                    data = resp.json()
                except ValueError as e:
                    raise ForecastClientError("Malformed forecast response") from e
                if not isinstance(data, dict):
                    raise ForecastClientError("Malformed forecast response")
                return data

        raise ForecastClientError("Forecast retries exhausted")
