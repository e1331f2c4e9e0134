import pytest
import requests

from cityweather.client import WeatherAPIClient
from cityweather.errors import WeatherFetchError, WeatherParseError


def test_requires_api_key():
    with pytest.raises(ValueError):
        WeatherAPIClient(api_key="")


def test_request_parameters(client, mock_weather, requests_mock, payloads):
    data = client.get_current_weather("London")

    assert data == payloads["london"]
    sent = requests_mock.last_request
    assert sent.qs == {"q": ["london"], "units": ["metric"], "appid": ["test-key"]}
    assert sent.timeout == WeatherAPIClient.DEFAULT_TIMEOUT == 2.0


def test_timeout_is_fetch_error(client, mock_weather):
    mock_weather("London", exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(WeatherFetchError) as exc_info:
        client.get_current_weather("London")

    assert exc_info.value.city == "London"
    assert isinstance(exc_info.value.cause, requests.exceptions.ConnectTimeout)
    assert not isinstance(exc_info.value, WeatherParseError)


def test_http_error_includes_body_snippet(client, mock_weather):
    mock_weather("Atlantis", status_code=404, json={"cod": "404", "message": "city not found"})

    with pytest.raises(WeatherFetchError) as exc_info:
        client.get_current_weather("Atlantis")

    assert "HTTP 404" in str(exc_info.value)
    assert "city not found" in str(exc_info.value)


def test_invalid_json_is_parse_error(client, mock_weather):
    mock_weather("London", text="<html>gateway</html>")

    with pytest.raises(WeatherParseError):
        client.get_current_weather("London")


def test_non_object_json_is_parse_error(client, mock_weather):
    mock_weather("London", json=["not", "an", "object"])

    with pytest.raises(WeatherParseError):
        client.get_current_weather("London")


def test_no_retries_by_default(client):
    adapter = client._session.adapters["https://"]
    assert adapter.max_retries.total == 0


def test_retries_are_configurable():
    c = WeatherAPIClient(api_key="test-key", max_retries=2)
    try:
        assert c._session.adapters["https://"].max_retries.total == 2
    finally:
        c.close()
