# models to keep data shapes explicit and reusable across the pipeline stages

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .config import Settings

@dataclass(frozen=True)
class WeatherRecord:
    # immutable snapshot of one city's current weather, in metric units
    id: int
    name: str
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int
    humidity: int
    wind_speed: float
    wind_deg: int

@dataclass(frozen=True)
class RankedEntry:
    # one row of a result file
    city: str
    value: float

class Metric(Enum):
    # (record attribute, csv column header)
    TEMPERATURE = ("temp", "Temperature")
    WIND_SPEED = ("wind_speed", "Wind Speed")

    def __init__(self, attribute: str, header: str):
        self.attribute = attribute
        self.header = header

    def project(self, record: WeatherRecord) -> RankedEntry:
        return RankedEntry(city=record.name, value=float(getattr(record, self.attribute)))

@dataclass(frozen=True)
class PipelineContext:
    # request scoped, built fresh for every uploaded object
    source_key: str
    settings: Settings

@dataclass(frozen=True)
class Response:
    status_code: str
    status_message: str

    @classmethod
    def success(cls) -> "Response":
        return cls(status_code="200", status_message="Success")

    @classmethod
    def failure(cls, message: str) -> "Response":
        return cls(status_code="400", status_message=message)

    def to_dict(self) -> Dict[str, str]:
        return {"statusCode": self.status_code, "statusMessage": self.status_message}
