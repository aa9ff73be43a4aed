# app/services/storage.py
"""
Object store backends.

Both backends expose the same small surface:
    put(prefix, upload) -> path
    exists(path) -> bool
    delete(path)
    url(path) -> public URL

Paths are relative keys such as "products/images/<hex>.png". Backend failures
are raised as StorageError so callers never see OSError or botocore types.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.errors import StorageError
from app.schemas.file import UploadedFile
from app.utils.s3 import get_s3_client

logger = logging.getLogger(__name__)

# head_object error codes meaning the key is absent
MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def generate_object_name(upload: UploadedFile, extension: Optional[str] = None) -> str:
    ext = extension or upload.extension or "bin"
    return f"{uuid.uuid4().hex}.{ext}"


class ObjectStore:
    def __init__(self, public_url: str):
        self.public_url = public_url.rstrip("/")

    def put(self, prefix: str, upload: UploadedFile, extension: Optional[str] = None) -> str:
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError

    def url(self, path: str) -> str:
        return f"{self.public_url}/{path.lstrip('/')}"


class LocalObjectStore(ObjectStore):
    """Stores objects below a directory that the app serves as static files."""

    def __init__(self, root: str, public_url: str):
        super().__init__(public_url)
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        full = (self.root / path).resolve()
        if self.root.resolve() not in full.parents:
            raise StorageError(f"Invalid object path: {path}")
        return full

    def put(self, prefix: str, upload: UploadedFile, extension: Optional[str] = None) -> str:
        key = f"{prefix.strip('/')}/{generate_object_name(upload, extension)}"
        target = self._resolve(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(upload.content)
        except OSError as e:
            raise StorageError(f"Could not write {key}: {e}") from e
        logger.debug("Stored %s (%d bytes)", key, upload.size)
        return key

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def delete(self, path: str) -> None:
        try:
            self._resolve(path).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {path}: {e}") from e


class S3ObjectStore(ObjectStore):
    def __init__(self, bucket: str, public_url: str, client=None):
        super().__init__(public_url)
        self.bucket = bucket
        self._client = client or get_s3_client()

    def put(self, prefix: str, upload: UploadedFile, extension: Optional[str] = None) -> str:
        key = f"{prefix.strip('/')}/{generate_object_name(upload, extension)}"
        extra = {"ContentType": upload.content_type} if upload.content_type else {}
        try:
            self._client.put_object(Bucket=self.bucket, Key=key, Body=upload.content, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Could not upload {key}: {e}") from e
        return key

    def exists(self, path: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=path)
            return True
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in MISSING_OBJECT_CODES:
                return False
            raise StorageError(f"Could not check {path}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Could not check {path}: {e}") from e

    def delete(self, path: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=path)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Could not delete {path}: {e}") from e


def build_object_store() -> ObjectStore:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "s3":
        return S3ObjectStore(settings.S3_BUCKET, settings.ASSET_URL)
    if backend == "local":
        return LocalObjectStore(settings.UPLOAD_DIR, settings.ASSET_URL)
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
