from __future__ import annotations
"""Object catalog backed by an S3-compatible endpoint."""
import logging
from typing import Callable, Iterator, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from .catalog import CatalogUnavailableError, ObjectCatalog
from .models import DirectCount, ObjectEntry
from .paths import SEPARATOR

LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 1000
MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class S3Catalog(ObjectCatalog):
    """Answers catalog queries with ``head_bucket`` and ``list_objects_v2``.

    Bucket ids are bucket names. Direct members and immediate subfolders come
    from delimiter listings, whose ``Contents`` and ``CommonPrefixes`` match
    the direct-children rule used everywhere else.
    """

    def __init__(
        self,
        *,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        region: str | None = None,
        client_factory: Callable[..., object] | None = None,
        page_size: int = PAGE_SIZE,
    ):
        self._client_factory = client_factory or boto3.client
        self._page_size = max(1, min(page_size, PAGE_SIZE))
        self._client = self._create_client(endpoint_url, access_key, secret_key, region)

    def _create_client(self, endpoint_url: str, access_key: str, secret_key: str, region: str | None):
        config = Config(signature_version="s3v4")
        kwargs = {
            "endpoint_url": endpoint_url or None,
            "aws_access_key_id": access_key,
            "aws_secret_access_key": secret_key,
            "config": config,
        }
        if region:
            kwargs["region_name"] = region
        return self._client_factory("s3", **kwargs)

    def bucket_exists(self, bucket_name: str) -> bool:
        try:
            self._client.head_bucket(Bucket=bucket_name)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            if str(error.get("Code")) in MISSING_BUCKET_CODES:
                return False
            raise CatalogUnavailableError(f"Unable to look up bucket '{bucket_name}': {exc}") from exc
        except BotoCoreError as exc:
            raise CatalogUnavailableError(f"Unable to look up bucket '{bucket_name}': {exc}") from exc
        return True

    def list_keys(self, bucket_id: str, prefix: Optional[str] = None) -> list[ObjectEntry]:
        entries = []
        for page in self._pages(bucket_id, prefix=prefix or ""):
            for content in page.get("Contents", []):
                if "Key" in content:
                    entries.append(ObjectEntry(key=content["Key"], size=content.get("Size")))
        entries.sort(key=lambda entry: entry.key)
        return entries

    def count_direct(self, bucket_id: str, folder: str) -> DirectCount:
        return self.folder_summary(bucket_id, folder)[0]

    def count_immediate_subfolders(self, bucket_id: str, folder: str) -> int:
        return self.folder_summary(bucket_id, folder)[1]

    def folder_summary(self, bucket_id: str, folder: str) -> tuple[DirectCount, int]:
        file_count = 0
        total_size = 0
        prefixes = set()
        for page in self._pages(bucket_id, prefix=folder, delimiter=SEPARATOR):
            for content in page.get("Contents", []):
                file_count += 1
                total_size += content.get("Size") or 0
            for common in page.get("CommonPrefixes", []):
                prefixes.add(common["Prefix"])
        return DirectCount(file_count=file_count, total_size=total_size), len(prefixes)

    def _pages(self, bucket_name: str, *, prefix: str = "", delimiter: str | None = None) -> Iterator[dict]:
        request_token: str | None = None
        while True:
            list_params = {"Bucket": bucket_name, "MaxKeys": self._page_size}
            if prefix:
                list_params["Prefix"] = prefix
            if delimiter:
                list_params["Delimiter"] = delimiter
            if request_token:
                list_params["ContinuationToken"] = request_token

            try:
                response = self._client.list_objects_v2(**list_params)
            except (ClientError, BotoCoreError) as exc:
                LOGGER.debug("list_objects_v2 failed for bucket '%s' prefix '%s'", bucket_name, prefix)
                raise CatalogUnavailableError(f"Unable to list bucket '{bucket_name}': {exc}") from exc
            yield response

            request_token = response.get("NextContinuationToken")
            if not response.get("IsTruncated", False) or not request_token:
                break
