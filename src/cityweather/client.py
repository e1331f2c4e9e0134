# OOP boundary for external http i/o
# all urls, keys and timeouts for the weather provider live here, so the rest of the code is pure and testable

from __future__ import annotations
from typing import Any, Dict
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import WeatherFetchError, WeatherParseError

class WeatherAPIClient:
    # this class encapsulates provider details like base URL, params, auth and timeout
    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
    DEFAULT_TIMEOUT = 2.0
    UNITS = "metric"

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 0,
        user_agent: str = "city-weather-rank/0.1",
    ):
        if not api_key:
            raise ValueError("api_key is required")

        self.api_key = api_key
        self.timeout = timeout
        self.user_agent = user_agent

        # default is no retries: a failed call fails the whole run and redelivery is owned by the trigger
        self._retry = Retry(total=max_retries, allowed_methods=("GET",), raise_on_status=False)
        self._session = self._build_session()

    def _build_session(self) -> requests.Session:
        # central place to configure http behavior like headers, adapters, retries
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def close(self) -> None:
        self._session.close()

    def get_current_weather(self, city: str) -> Dict[str, Any]:
        # fetch current weather JSON for one city; schema checks are left to the parser
        params = {
            "q": city,
            "units": self.UNITS,
            "appid": self.api_key,
        }

        try:
            resp = self._session.get(self.BASE_URL, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            # timeouts land here too
            raise WeatherFetchError(city, f"request error: {exc}", exc) from exc

        if resp.status_code >= 400:
            # include a short response snippet to speed up triage
            snippet = (resp.text or "")[:300]
            raise WeatherFetchError(city, f"HTTP {resp.status_code}. Body: {snippet}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise WeatherParseError(city, f"invalid JSON: {exc}", exc) from exc

        if not isinstance(data, dict):
            raise WeatherParseError(city, f"expected a JSON object, got {type(data).__name__}")

        return data
