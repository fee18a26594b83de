# =============================================================================
# core/services/storage_service.py - Supabase Storage Image Operations
# =============================================================================
# Uploads listing and article images to a public Supabase Storage bucket and
# hands back public URLs. Deletion accepts either the public URL or the
# bucket path.
# =============================================================================

import logging
import mimetypes
import re
import time
from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageUploadError, StorageDeleteError

logger = logging.getLogger(__name__)

# Folders used inside the bucket
LISTINGS_FOLDER = "listings"
ARTICLES_FOLDER = "articles"
ALLOWED_FOLDERS = (LISTINGS_FOLDER, ARTICLES_FOLDER)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def build_object_path(filename: str, folder: str, timestamp_ms: int | None = None) -> str:
    """
    Build a collision-resistant object path for an uploaded file.

    Example:
        build_object_path("my photo.JPG", "listings", 1700000000000)
        -> "listings/1700000000000_my_photo.jpg"
    """
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    path = PurePosixPath(filename or "image.jpg")
    stem = _UNSAFE_CHARS.sub("_", path.stem) or "image"
    suffix = path.suffix.lower() or ".jpg"
    return f"{folder}/{stamp}_{stem}{suffix}"


def path_from_public_url(url_or_path: str, bucket: str | None = None) -> str:
    """
    Recover the bucket path from a public (or transformed) storage URL.

    Values that are not URLs are assumed to already be bucket paths.

    Example:
        ".../storage/v1/object/public/images/listings/1_a.jpg" -> "listings/1_a.jpg"
    """
    bucket = bucket or settings.STORAGE_BUCKET
    if "://" not in url_or_path:
        return url_or_path.lstrip("/")

    url_path = unquote(urlsplit(url_or_path).path)
    for marker in (f"/object/public/{bucket}/", f"/render/image/public/{bucket}/"):
        if marker in url_path:
            return url_path.split(marker, 1)[1]

    raise ValueError(f"Not a public URL for bucket '{bucket}': {url_or_path}")


class StorageService:
    """
    Service for Supabase Storage image operations.

    Images live in one public bucket, grouped by folder (listings/articles).
    """

    @staticmethod
    def _bucket():
        client = SupabaseClient.get_client()
        return client.storage.from_(settings.STORAGE_BUCKET)

    @staticmethod
    def upload_image(
        content: bytes,
        filename: str,
        folder: str = LISTINGS_FOLDER,
        content_type: str | None = None,
    ) -> str:
        """
        Upload one image and return its public URL.

        Args:
            content: Image bytes
            filename: Original filename (sanitized into the object path)
            folder: Bucket folder
            content_type: MIME type (guessed from filename if omitted)

        Returns:
            Public URL of the stored image

        Raises:
            StorageUploadError: If upload fails
        """
        path = build_object_path(filename, folder)
        mime = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"

        try:
            bucket = StorageService._bucket()
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": mime, "upsert": "false"}
            )
            url = bucket.get_public_url(path)

            logger.info(f"Uploaded image to storage: {path}")
            return url

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def upload_images(
        files: list[tuple[bytes, str, str | None]],
        folder: str = LISTINGS_FOLDER,
    ) -> list[str]:
        """
        Upload several images, preserving order.

        Args:
            files: (content, filename, content_type) tuples
            folder: Bucket folder

        Returns:
            Public URLs in the same order as files
        """
        return [
            StorageService.upload_image(content, filename, folder, content_type)
            for content, filename, content_type in files
        ]

    @staticmethod
    def delete_image(url_or_path: str) -> None:
        """
        Delete one image by public URL or bucket path.

        Raises:
            StorageDeleteError: If the URL is foreign or removal fails
        """
        try:
            path = path_from_public_url(url_or_path)
            StorageService._bucket().remove([path])
            logger.info(f"Deleted image from storage: {path}")

        except Exception as e:
            logger.error(f"Failed to delete image {url_or_path}: {e}")
            raise StorageDeleteError(url_or_path, str(e))

    @staticmethod
    def delete_images(urls: list[str]) -> int:
        """
        Best-effort deletion of several images.

        Returns:
            Number of images deleted; failures are logged and skipped
        """
        deleted = 0
        for url in urls:
            try:
                StorageService.delete_image(url)
                deleted += 1
            except StorageDeleteError:
                continue
        return deleted

    @staticmethod
    def get_optimized_url(url_or_path: str, width: int, height: int | None = None) -> str:
        """
        Public URL with on-the-fly resizing.

        With a height the image is cropped to fill; without one it is
        scaled to fit the width.
        """
        path = path_from_public_url(url_or_path)
        transform: dict = {"width": width, "quality": 80}
        if height:
            transform.update({"height": height, "resize": "cover"})
        else:
            transform["resize"] = "contain"

        return StorageService._bucket().get_public_url(path, {"transform": transform})
