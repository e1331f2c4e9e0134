import pytest

from cityweather.config import Settings
from cityweather.errors import ConfigError


def test_from_env(monkeypatch):
    monkeypatch.setenv("INPUT_LOCATION", "city-uploads")
    monkeypatch.setenv("OUTPUT_LOCATION", "city-results")
    monkeypatch.setenv("WEATHER_API_KEY", "secret")

    settings = Settings.from_env()

    assert settings == Settings("city-uploads", "city-results", "secret")


@pytest.mark.parametrize("missing", ["INPUT_LOCATION", "OUTPUT_LOCATION", "WEATHER_API_KEY"])
def test_missing_variable(monkeypatch, missing):
    for var in ("INPUT_LOCATION", "OUTPUT_LOCATION", "WEATHER_API_KEY"):
        monkeypatch.setenv(var, "x")
    monkeypatch.setenv(missing, "")

    with pytest.raises(ConfigError, match=missing):
        Settings.from_env()
