# read-only process configuration, resolved once from the environment at cold start

from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache
from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()  # in production, environment variables are injected by the lambda runtime

@dataclass(frozen=True)
class Settings:
    input_location: str
    output_location: str
    weather_api_key: str

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        for field_name, var in (
            ("input_location", "INPUT_LOCATION"),
            ("output_location", "OUTPUT_LOCATION"),
            ("weather_api_key", "WEATHER_API_KEY"),
        ):
            value = os.getenv(var)
            if not value:
                # fail early instead of calling S3 with an empty bucket name
                raise ConfigError(f"{var} not set")
            values[field_name] = value
        return cls(**values)

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # warm lambda containers reuse the settings read on the first invocation
    return Settings.from_env()
