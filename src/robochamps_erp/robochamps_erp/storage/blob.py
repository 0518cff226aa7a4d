from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from supabase import Client, create_client

from ..core.exceptions import DependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileUpload:
    """File payload as received from the HTTP layer."""

    file_name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        if "." not in self.file_name:
            return "bin"
        return self.file_name.rsplit(".", 1)[-1].lower()


class BlobStorage(Protocol):
    def put(self, *, bucket: str, path: str, upload: FileUpload) -> str:
        """Store the payload and return its public URL."""

        raise NotImplementedError


class SupabaseBlobStorage(BlobStorage):
    """Blob storage backed by Supabase Storage buckets.

    The client is created lazily so the app can start without storage configured.
    """

    def __init__(self, url: str, key: str):
        self._url = url
        self._key = key
        self._client: Client | None = None

    def _get_client(self) -> Client:
        if not self._url or not self._key:
            raise DependencyError("File storage is not configured. Please contact administrator.")
        if self._client is None:
            self._client = create_client(self._url, self._key)
        return self._client

    def put(self, *, bucket: str, path: str, upload: FileUpload) -> str:
        client = self._get_client()
        try:
            client.storage.from_(bucket).upload(
                path,
                upload.data,
                {"content-type": upload.content_type, "upsert": "false"},
            )
            url = client.storage.from_(bucket).get_public_url(path)
        except Exception as exc:
            logger.exception("Upload to %s/%s failed", bucket, path)
            raise DependencyError("Failed to upload file") from exc
        return url.rstrip("?")
