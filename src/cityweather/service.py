# orchestration and business rules.
# each stage is a small function over explicit collaborators (store, client) so tests can swap them out
# process_upload chains them strictly forward: ingest -> fetch -> rank -> write -> cleanup


from __future__ import annotations

import io
import logging
from typing import BinaryIO, Iterator, List, Sequence, Tuple
import pandas as pd
from .client import WeatherAPIClient
from .errors import (
    SerializationError,
    SinkDeleteError,
    SinkWriteError,
    SourceReadError,
    StorageError,
    WeatherParseError,
)
from .models import Metric, PipelineContext, RankedEntry, WeatherRecord
from .storage import ObjectStore

logger = logging.getLogger(__name__)

DELIMITER = b","
CHUNK_SIZE = 64 * 1024
TOP_N = 3
TEMPERATURE_KEY = "highest_temperatures.csv"
WIND_KEY = "highest_wind.csv"
CSV_CONTENT_TYPE = "text/csv"

# split a byte stream on a delimiter without loading it whole; the last fragment needs no trailing delimiter
def iter_tokens(stream: BinaryIO, delimiter: bytes = DELIMITER, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    pending = b""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        pending += chunk
        *complete, pending = pending.split(delimiter)
        yield from complete
    if pending:
        yield pending

def parse_cities(stream: BinaryIO, delimiter: bytes = DELIMITER, chunk_size: int = CHUNK_SIZE) -> List[str]:
    cities: List[str] = []
    for token in iter_tokens(stream, delimiter, chunk_size):
        try:
            text = token.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SourceReadError(f"input is not valid UTF-8: {exc}") from exc
        # drop every whitespace character, "New York" becomes "NewYork" as the provider accepts both
        city = "".join(text.split())
        if city:
            cities.append(city)
    return cities

def read_cities(store: ObjectStore, bucket: str, key: str) -> List[str]:
    try:
        body = store.get(bucket, key)
    except StorageError as exc:
        raise SourceReadError(f"failed to extract data from s3://{bucket}/{key}: {exc}") from exc

    try:
        return parse_cities(body)
    except StorageError as exc:
        # the object was found but the stream broke while reading it
        raise SourceReadError(f"failed to read s3://{bucket}/{key}: {exc}") from exc
    finally:
        body.close()

def _number(container, field: str) -> float:
    value = container[field]
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{field!r} must be a number, got {type(value).__name__}")
    return float(value)

def _integer(container, field: str) -> int:
    value = container[field]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field!r} must be an integer, got {type(value).__name__}")
    return value

# transform raw provider payload into our typed value object and check shape
def parse_weather(city: str, payload) -> WeatherRecord:
    try:
        main = payload["main"]
        wind = payload["wind"]
        name = payload["name"]
        if not isinstance(name, str):
            raise TypeError(f"'name' must be a string, got {type(name).__name__}")
        return WeatherRecord(
            id=_integer(payload, "id"),
            name=name,
            temp=_number(main, "temp"),
            feels_like=_number(main, "feels_like"),
            temp_min=_number(main, "temp_min"),
            temp_max=_number(main, "temp_max"),
            pressure=_integer(main, "pressure"),
            humidity=_integer(main, "humidity"),
            wind_speed=_number(wind, "speed"),
            wind_deg=_integer(wind, "deg"),
        )
    except (KeyError, TypeError) as exc:
        raise WeatherParseError(city, f"unexpected API shape: {exc!r}", exc) from exc

# sequential on purpose: one city at a time, the first failure aborts the whole list
def fetch_weather(client: WeatherAPIClient, cities: Sequence[str]) -> List[WeatherRecord]:
    records: List[WeatherRecord] = []
    for city in cities:
        logger.debug("Fetching current weather for %s", city)
        payload = client.get_current_weather(city)
        records.append(parse_weather(city, payload))
    return records

def rank_top(records: Sequence[WeatherRecord], metric: Metric, limit: int = TOP_N) -> List[RankedEntry]:
    entries = [metric.project(r) for r in records]
    # sorted() is stable and reverse=True keeps input order among equal values
    return sorted(entries, key=lambda e: e.value, reverse=True)[:limit]

def to_csv(entries: Sequence[RankedEntry], value_header: str) -> bytes:
    df = pd.DataFrame(
        [(entry.city, entry.value) for entry in entries],
        columns=["City", value_header],
    )
    try:
        buf = io.StringIO()
        df.to_csv(buf, index=False, lineterminator="\n")
        return buf.getvalue().encode("utf-8")
    except (ValueError, TypeError) as exc:
        # UnicodeEncodeError is a ValueError
        raise SerializationError(f"failed to marshal csv for {value_header!r}: {exc}") from exc

def write_results(store: ObjectStore, bucket: str, key: str, entries: Sequence[RankedEntry], metric: Metric) -> None:
    body = to_csv(entries, metric.header)
    try:
        store.put(bucket, key, body, CSV_CONTENT_TYPE)
    except StorageError as exc:
        raise SinkWriteError(f"error uploading {key}: {exc}") from exc
    logger.info("Wrote %d rows to s3://%s/%s", len(entries), bucket, key)

def remove_upload(store: ObjectStore, bucket: str, key: str) -> None:
    try:
        store.delete(bucket, key)
    except StorageError as exc:
        raise SinkDeleteError(f"error removing upload file {key}: {exc}") from exc
    logger.info("Removed s3://%s/%s", bucket, key)

# single upload path: read -> fetch -> rank -> write both files -> delete input
def process_upload(
    ctx: PipelineContext,
    store: ObjectStore,
    client: WeatherAPIClient,
) -> Tuple[List[RankedEntry], List[RankedEntry]]:
    settings = ctx.settings
    cities = read_cities(store, settings.input_location, ctx.source_key)
    logger.info("Read %d cities from %s", len(cities), ctx.source_key)

    records = fetch_weather(client, cities)

    temperatures = rank_top(records, Metric.TEMPERATURE)
    winds = rank_top(records, Metric.WIND_SPEED)
    logger.info("Highest temperatures: %s", temperatures)
    logger.info("Highest wind speeds: %s", winds)

    # a failure on the wind file leaves the temperature file in place
    write_results(store, settings.output_location, TEMPERATURE_KEY, temperatures, Metric.TEMPERATURE)
    write_results(store, settings.output_location, WIND_KEY, winds, Metric.WIND_SPEED)

    remove_upload(store, settings.input_location, ctx.source_key)
    return temperatures, winds
