"""S3-compatible snapshot storage backed by boto3.

Objects live under ``s3://<bucket>/<path>/<key>``. Listing strips the path
prefix so names match what ``create`` and ``load`` use.
"""

import logging
from typing import BinaryIO

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from dbsnapshot.config import StorageConfig
from dbsnapshot.errors import NotFoundError, StorageError
from dbsnapshot.types import StoredSnapshot

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def build_client_options(config: StorageConfig) -> dict:
    """Keyword arguments for ``boto3.client("s3", ...)``.

    An endpoint without a region means a non-AWS S3-compatible provider:
    empty region and path-style addressing. Otherwise the region is used and
    an endpoint, if any, overrides the regional one.
    """
    options: dict = {}

    if not config.region and config.endpoint:
        # No region; botocore rejects an empty string
        options["region_name"] = None
        options["endpoint_url"] = config.endpoint
        options["config"] = Config(s3={"addressing_style": "path"})
    else:
        options["region_name"] = config.region or None
        if config.endpoint:
            options["endpoint_url"] = config.endpoint

    if config.access_key:
        options["aws_access_key_id"] = config.access_key
        options["aws_secret_access_key"] = config.secret_key

    return options


def _error_code(e: ClientError) -> str:
    return str((e.response or {}).get("Error", {}).get("Code", ""))


class S3StorageClient:
    """Snapshot storage in an S3 bucket under an optional path prefix."""

    def __init__(self, config: StorageConfig, client=None):
        self.bucket = config.bucket
        self.prefix = config.path.strip("/")
        if client is None:
            try:
                client = boto3.client("s3", **build_client_options(config))
            except (BotoCoreError, ValueError) as e:
                raise StorageError(f"Cannot create S3 client for bucket '{self.bucket}': {e}") from e
        self._s3 = client

    def put(self, key: str, data: BinaryIO) -> None:
        s3_key = self._key(key)
        logger.debug(f"Uploading s3://{self.bucket}/{s3_key}")
        try:
            self._s3.upload_fileobj(data, self.bucket, s3_key)
        except (ClientError, BotoCoreError, S3UploadFailedError) as e:
            raise StorageError(f"Failed to upload {key} to bucket '{self.bucket}': {e}") from e

    def get(self, key: str) -> BinaryIO:
        s3_key = self._key(key)
        logger.debug(f"Downloading s3://{self.bucket}/{s3_key}")
        try:
            response = self._s3.get_object(Bucket=self.bucket, Key=s3_key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise NotFoundError(f"Snapshot {key} does not exist") from e
            raise StorageError(f"Failed to download {key}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to download {key}: {e}") from e
        return response["Body"]

    def exists(self, key: str) -> bool:
        try:
            self._s3.head_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return False
            raise StorageError(f"Failed to check {key}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to check {key}: {e}") from e
        return True

    def list(self) -> list[StoredSnapshot]:
        prefix = f"{self.prefix}/" if self.prefix else ""
        paginator = self._s3.get_paginator("list_objects_v2")
        snapshots = []

        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    name = obj["Key"][len(prefix):]
                    if not name or name.endswith("/"):
                        continue
                    snapshots.append(
                        StoredSnapshot(
                            name=name,
                            size=obj.get("Size"),
                            last_modified=obj.get("LastModified"),
                        )
                    )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to list bucket '{self.bucket}': {e}") from e

        return snapshots

    def _key(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.prefix}/{key}" if self.prefix else key
