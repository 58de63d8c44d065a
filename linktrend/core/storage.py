"""
Client for the Bunny storage zone that backs uploaded media.

Files are PUT/DELETEd by key under the zone and served publicly from the
CDN hostname. Upload failures are raised with a category so operators can
tell bad credentials from a wrong zone name; deletes never raise.
"""
import logging
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote, unquote, urlparse

import httpx

from linktrend.core.config import settings
from linktrend.core.exceptions import ExternalServiceFailure

logger = logging.getLogger(__name__)


class StorageError(ExternalServiceFailure):
    default_detail = "Storage request failed"


class StorageAuthError(StorageError):
    default_detail = "Invalid storage API key - please check your credentials"


class StorageZoneNotFound(StorageError):
    default_detail = "Storage zone not found - please verify the zone name"


class BunnyStorage:

    def __init__(
        self,
        storage_zone: str,
        api_key: str,
        cdn_hostname: str,
        endpoint: str = "https://storage.bunnycdn.com",
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.storage_zone = storage_zone
        self.api_key = api_key
        self.cdn_hostname = cdn_hostname
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return f"{self.endpoint}/{self.storage_zone}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"AccessKey": self.api_key},
            timeout=self.timeout,
            transport=self._transport,
        )

    def _object_url(self, key: str) -> str:
        # Keys may carry "#", "?" or "%" from user file names
        return f"{self.base_url}/{quote(key, safe='/')}"

    def cdn_url(self, key: str) -> str:
        return f"https://{self.cdn_hostname}/{quote(key, safe='/')}"

    def key_from_url(self, url: Optional[str]) -> Optional[str]:
        """Maps a public CDN URL back to its storage key, or None if it isn't ours."""
        if not url:
            return None
        parsed = urlparse(url)
        if parsed.netloc != self.cdn_hostname:
            return None
        key = unquote(parsed.path).lstrip("/")
        return key or None

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        if response.status_code == 401:
            raise StorageAuthError()
        if response.status_code == 404:
            raise StorageZoneNotFound()
        raise StorageError(f"Storage error ({response.status_code}): {response.text}")

    async def upload_file(self, key: str, data: bytes, content_type: str) -> str:
        url = self._object_url(key)
        logger.info("Uploading %d bytes to storage key %s", len(data), key)
        try:
            async with self._client() as client:
                response = await client.put(url, content=data, headers={"Content-Type": content_type})
        except httpx.HTTPError as e:
            logger.error("Storage upload of %s failed: %s", key, e)
            raise StorageError(f"Storage request failed: {e}")

        if response.status_code >= 400:
            logger.error("Storage upload of %s failed: %s %s", key, response.status_code, response.text)
        self._raise_for_status(response)
        return self.cdn_url(key)

    async def delete_file(self, key: str) -> bool:
        url = self._object_url(key)
        try:
            async with self._client() as client:
                response = await client.delete(url)
        except httpx.HTTPError as e:
            logger.warning("Storage delete of %s failed: %s", key, e)
            return False

        if response.status_code >= 400:
            logger.warning("Storage delete of %s failed: %s %s", key, response.status_code, response.text)
            return False
        return True

    async def list_files(self, path: str = "") -> List[dict]:
        url = f"{self.base_url}/{path}"
        if not url.endswith("/"):
            url += "/"
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise StorageError(f"Storage request failed: {e}")
        self._raise_for_status(response)
        return response.json()


@lru_cache()
def get_storage() -> BunnyStorage:
    return BunnyStorage(
        storage_zone=settings.BUNNY_STORAGE_ZONE,
        api_key=settings.BUNNY_API_KEY,
        cdn_hostname=settings.BUNNY_CDN_HOSTNAME,
        endpoint=settings.BUNNY_STORAGE_ENDPOINT,
        timeout=settings.STORAGE_TIMEOUT_SECONDS,
    )
