# object store capability used by the pipeline, plus the S3 implementation
# implementations raise StorageError so the stages can wrap it in their own error type

from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import StorageError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    def get(self, bucket: str, key: str) -> BinaryIO:
        ...

    def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        ...

    def delete(self, bucket: str, key: str) -> None:
        ...


class _S3Body:
    # read-only view of a StreamingBody; a broken read surfaces as StorageError

    def __init__(self, body, location: str):
        self._body = body
        self._location = location

    def read(self, size: int = -1) -> bytes:
        try:
            return self._body.read(size if size >= 0 else None)
        except (BotoCoreError, OSError) as e:
            raise StorageError(f"failed reading {self._location}: {e}") from e

    def close(self) -> None:
        self._body.close()


class S3ObjectStore:
    def __init__(self, client=None):
        # a default client is created from the lambda execution role when none is injected
        self.client = client or boto3.client("s3")

    def get(self, bucket: str, key: str) -> BinaryIO:
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to get s3://%s/%s: %s", bucket, key, e)
            raise StorageError(f"failed to get s3://{bucket}/{key}: {e}") from e
        return _S3Body(response["Body"], f"s3://{bucket}/{key}")

    def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        # overwrites any existing object under the same key
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to put s3://%s/%s: %s", bucket, key, e)
            raise StorageError(f"failed to put s3://{bucket}/{key}: {e}") from e

    def delete(self, bucket: str, key: str) -> None:
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to delete s3://%s/%s: %s", bucket, key, e)
            raise StorageError(f"failed to delete s3://{bucket}/{key}: {e}") from e
