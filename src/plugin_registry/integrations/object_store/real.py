"""S3-backed object store using boto3."""

import logging
import math
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from plugin_registry.integrations.object_store.abc import ObjectStore
from plugin_registry.integrations.object_store.types import (
    ObjectConfirmationError,
    ObjectNotFoundError,
    ObjectStoreError,
    ObjectTooLargeError,
)

logger = logging.getLogger(__name__)

CONFIRM_POLL_SECONDS = 5
NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class RealObjectStore(ObjectStore):
    """Production store for a single S3 bucket.

    Credentials and region come from the standard AWS configuration chain
    (environment, shared config files, instance metadata).
    """

    def __init__(self, bucket: str, client: Any = None) -> None:
        """Create RealObjectStore.

        Args:
            bucket: Name of the S3 bucket holding the registry
            client: Optional pre-built S3 client (defaults to boto3.client("s3"))

        Raises:
            ObjectStoreError: If no client can be created from the AWS configuration
        """
        self._bucket = bucket
        if client is None:
            try:
                client = boto3.client("s3")
            except BotoCoreError as e:
                raise ObjectStoreError(
                    "couldn't load default configuration, have you set up your AWS account?",
                    key="",
                ) from e
        self._client = client

    @property
    def bucket(self) -> str:
        return self._bucket

    def get_object(self, key: str) -> bytes:
        logger.debug("GET s3://%s/%s", self._bucket, key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise ObjectStoreError(f"couldn't get object {key}: {e}", key) from e
        except BotoCoreError as e:
            raise ObjectStoreError(f"couldn't get object {key}: {e}", key) from e

        body = response["Body"]
        try:
            return body.read()
        except BotoCoreError as e:
            raise ObjectStoreError(f"couldn't read object body {key}: {e}", key) from e
        finally:
            body.close()

    def put_object(self, key: str, body: bytes | BinaryIO) -> None:
        logger.debug("PUT s3://%s/%s", self._bucket, key)
        try:
            self._client.put_object(Bucket=self._bucket, Key=key, Body=body)
        except ClientError as e:
            if _error_code(e) == "EntityTooLarge":
                raise ObjectTooLargeError(
                    f"error while uploading object to {self._bucket}: the object is too large",
                    key,
                ) from e
            raise ObjectStoreError(str(e), key) from e
        except BotoCoreError as e:
            raise ObjectStoreError(str(e), key) from e

    def wait_until_exists(self, key: str, timeout_seconds: float) -> None:
        attempts = max(1, math.ceil(timeout_seconds / CONFIRM_POLL_SECONDS))
        waiter = self._client.get_waiter("object_exists")
        try:
            waiter.wait(
                Bucket=self._bucket,
                Key=key,
                WaiterConfig={"Delay": CONFIRM_POLL_SECONDS, "MaxAttempts": attempts},
            )
        except WaiterError as e:
            raise ObjectConfirmationError(
                f"failed attempt to wait for object {key} to exist", key
            ) from e
