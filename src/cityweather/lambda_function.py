# S3 upload lambda entry point, triggered by ObjectCreated notifications on the input bucket
# each uploaded city list is read, ranked, written to the output bucket and then deleted

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import unquote_plus

from .client import WeatherAPIClient
from .config import Settings, get_settings
from .errors import ConfigError, InvocationError, PipelineError
from .models import PipelineContext, Response
from .service import process_upload
from .storage import ObjectStore, S3ObjectStore

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

NOTHING_PROCESSED = "No records for the input bucket"


def _upload_key(record: Dict[str, Any]) -> Tuple[str, str]:
    s3 = record["s3"]
    # S3 notifications carry url-encoded keys, spaces arrive as '+'
    return s3["bucket"]["name"], unquote_plus(s3["object"]["key"])


# one pipeline run per record in the batch, stopping at the first failure
def handle_event(
    event: Dict[str, Any],
    settings: Settings,
    store: ObjectStore,
    client: WeatherAPIClient,
) -> Response:
    records = event.get("Records") or []
    if not records:
        return Response.failure("event contains no records")

    processed = 0
    for record in records:
        try:
            bucket, key = _upload_key(record)
        except (KeyError, TypeError) as e:
            logger.error("Malformed S3 event record: %r", record)
            return Response.failure(f"malformed S3 event record: {e!r}")

        if bucket != settings.input_location:
            logger.warning("Skipping s3://%s/%s, not the configured input bucket", bucket, key)
            continue

        ctx = PipelineContext(source_key=key, settings=settings)
        try:
            process_upload(ctx, store, client)
        except PipelineError as e:
            logger.exception("Processing failed for s3://%s/%s", bucket, key)
            return Response.failure(str(e))
        processed += 1

    if not processed:
        # nothing to redeliver, misrouted notifications would fail forever
        return Response(status_code="200", status_message=NOTHING_PROCESSED)
    return Response.success()


def lambda_handler(event: Dict[str, Any], context: Any, store: Optional[ObjectStore] = None) -> Dict[str, str]:
    logger.info("Upload Lambda invoked with event: %s", event)
    try:
        settings = get_settings()
    except ConfigError:
        logger.exception("Invalid configuration")
        raise

    client = WeatherAPIClient(api_key=settings.weather_api_key)
    try:
        response = handle_event(event, settings, store or S3ObjectStore(), client)
    finally:
        client.close()

    if response.status_code != "200":
        logger.error("Invocation failed: %s", response.to_dict())
        raise InvocationError(response)
    return response.to_dict()
