"""S3-compatible blob store (AWS S3, Cloudflare R2, MinIO) using boto3."""

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from mediakeeper.storage.base import BlobStore, StoreError

R2_ENDPOINT_TEMPLATE = "https://{account_id}.r2.cloudflarestorage.com"


def resolve_endpoint_url(endpoint_url: str | None, account_id: str | None) -> str | None:
    """Explicit endpoint wins; otherwise derive the R2 endpoint from the account id."""
    if endpoint_url:
        return endpoint_url
    if account_id:
        return R2_ENDPOINT_TEMPLATE.format(account_id=account_id)
    return None


class S3BlobStore(BlobStore):
    """Uploads archived media with ``put_object``.

    boto3 is synchronous, so each call runs in a worker thread to keep the
    event loop free.
    """

    def __init__(
        self,
        bucket_name: str,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        region: str = "auto",
        client=None,
    ):
        if not bucket_name:
            raise StoreError("Bucket name not configured")

        self.bucket_name = bucket_name
        try:
            self._client = client or boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key_id or None,
                aws_secret_access_key=secret_access_key or None,
                region_name=region,
            )
        except (BotoCoreError, ValueError) as e:
            raise StoreError(f"Failed to initialize S3 client: {e}") from e

        logger.info(
            f"S3 blob store ready: bucket={bucket_name}, endpoint={endpoint_url or 'AWS S3'}"
        )

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=bytes(data),
                ContentType=content_type,
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "unknown")
            logger.error(f"Failed to upload file {key}: {code}")
            raise StoreError(f"S3 put_object failed for {key}: {code}") from e
        except BotoCoreError as e:
            logger.error(f"Failed to upload file {key}: {e}")
            raise StoreError(f"S3 put_object failed for {key}: {e}") from e

        logger.info(f"Successfully uploaded file: {key} ({len(data)} bytes, {content_type})")
