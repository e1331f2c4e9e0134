# shared fixtures: an in-memory object store and canned provider payloads so tests never hit S3 or the network

import io
import json
from pathlib import Path

import pytest

from cityweather.client import WeatherAPIClient
from cityweather.config import Settings
from cityweather.errors import StorageError

DATA_DIR = Path(__file__).parent / "data"


class InMemoryObjectStore:
    # satisfies the ObjectStore protocol; failures are injected per (operation, key)

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.failures = {}

    def fail(self, operation, key):
        self.failures[(operation, key)] = StorageError(f"injected {operation} failure for {key}")

    def _check(self, operation, key):
        self.calls.append((operation, key))
        if (operation, key) in self.failures:
            raise self.failures[(operation, key)]

    def get(self, bucket, key):
        self._check("get", key)
        try:
            return io.BytesIO(self.objects[(bucket, key)])
        except KeyError:
            raise StorageError(f"NoSuchKey: s3://{bucket}/{key}")

    def put(self, bucket, key, data, content_type):
        self._check("put", key)
        self.objects[(bucket, key)] = data

    def delete(self, bucket, key):
        self._check("delete", key)
        self.objects.pop((bucket, key), None)


@pytest.fixture
def settings():
    return Settings(input_location="city-uploads", output_location="city-results", weather_api_key="test-key")


@pytest.fixture
def store():
    return InMemoryObjectStore()


@pytest.fixture
def client():
    c = WeatherAPIClient(api_key="test-key")
    yield c
    c.close()


@pytest.fixture
def payloads():
    return {p.stem: json.loads(p.read_text()) for p in DATA_DIR.glob("*.json")}


@pytest.fixture
def mock_weather(requests_mock, payloads):
    # register one canned response per city; matching is on the q query parameter
    def register(city, **kwargs):
        if not kwargs:
            kwargs = {"json": payloads[city.lower()]}
        requests_mock.get(f"{WeatherAPIClient.BASE_URL}?q={city}", **kwargs)

    for name in payloads:
        register(name.capitalize())
    return register
