# runs the pipeline for one already uploaded key and prints both rankings, handy outside of lambda

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional
from .client import WeatherAPIClient
from .config import Settings
from .errors import ConfigError, PipelineError
from .models import PipelineContext
from .service import process_upload
from .storage import ObjectStore, S3ObjectStore

def main(argv: Optional[List[str]] = None, store: Optional[ObjectStore] = None) -> int:
    parser = argparse.ArgumentParser(description="Rank the hottest and windiest cities of an uploaded list.")
    parser.add_argument("key", help="key of the city list in INPUT_LOCATION")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every fetch")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    client = WeatherAPIClient(api_key=settings.weather_api_key)
    try:
        temperatures, winds = process_upload(
            PipelineContext(source_key=args.key, settings=settings),
            store or S3ObjectStore(),
            client,
        )
    except PipelineError as exc:
        print(f"failed: {exc}", file=sys.stderr)
        return 1
    finally:
        client.close()

    for r in temperatures:
        print(f"{r.city} Temperature: {r.value:.2f}")
    for r in winds:
        print(f"{r.city} Wind Speed: {r.value:.2f}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
