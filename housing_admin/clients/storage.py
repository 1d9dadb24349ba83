"""
Object storage client (Supabase-compatible storage REST API).
Uploads bytes into a bucket and resolves their public URLs.
"""

import logging

import httpx

from housing_admin.utils.exceptions import BackendError

logger = logging.getLogger(__name__)


class ObjectStorageClient:
    """Uploads files to public buckets of the storage service."""

    def __init__(self, http: httpx.AsyncClient, storage_url: str, api_key: str):
        self.http = http
        self.storage_url = storage_url.rstrip("/")
        self.api_key = api_key

    def _headers(self, content_type: str) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
            "Content-Type": content_type,
            "x-upsert": "false",
            "cache-control": "3600",
        }

    def public_url(self, bucket: str, key: str) -> str:
        """Public download URL of a stored object."""
        return f"{self.storage_url}/storage/v1/object/public/{bucket}/{key}"

    async def upload(self, bucket: str, key: str, content: bytes, content_type: str) -> str:
        """
        Store an object without overwriting an existing one.

        Args:
            bucket: Bucket name
            key: Object key inside the bucket
            content: File bytes
            content_type: MIME type sent with the object

        Returns:
            Public URL of the stored object

        Raises:
            BackendError: If storage rejects the upload or cannot be reached
        """
        url = f"{self.storage_url}/storage/v1/object/{bucket}/{key}"
        operation = f"upload {key}"
        try:
            response = await self.http.post(url, content=content, headers=self._headers(content_type))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json()
            except ValueError:
                body = e.response.text or None
            logger.error(
                f"Storage rejected upload of {key}: {e.response.status_code}",
                extra={"bucket": bucket, "status_code": e.response.status_code}
            )
            raise BackendError(operation, e.response.status_code, body)
        except httpx.RequestError as e:
            logger.error(f"Failed to reach storage for {key}: {e}", extra={"bucket": bucket})
            raise BackendError(operation)

        logger.info(f"Uploaded {len(content)} bytes to {bucket}/{key}")
        return self.public_url(bucket, key)
