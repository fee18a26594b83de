# =============================================================================
# app/routers/upload.py - Image Upload
# =============================================================================
# Accepts multipart image uploads for listings and articles, validates
# them, and stores them in Supabase Storage. Returns public URLs that are
# then saved on the listing or article.
# =============================================================================

import logging
from pathlib import PurePosixPath
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    InvalidQueryError,
    NoImagesError,
    TooManyFilesError,
)
from app.responses import success_response
from core.services.storage_service import ALLOWED_FOLDERS, LISTINGS_FOLDER, StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_image_files(files: list[UploadFile]) -> list[tuple[bytes, str, str | None]]:
    """
    Validate uploads and read them into memory.

    Raises:
        NoImagesError: If no files were sent
        TooManyFilesError: If more than MAX_UPLOAD_FILES were sent
        InvalidFileTypeError: If an extension isn't an allowed image type
        FileTooLargeError: If a file exceeds MAX_UPLOAD_SIZE_MB
    """
    files = [f for f in files if f.filename]
    if not files:
        raise NoImagesError()
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise TooManyFilesError(len(files), settings.MAX_UPLOAD_FILES)

    allowed = settings.allowed_image_extensions_list
    images = []
    for upload in files:
        filename = upload.filename or "image.jpg"
        if PurePosixPath(filename).suffix.lower() not in allowed:
            raise InvalidFileTypeError(filename, allowed)

        content = await upload.read()
        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(filename, len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        images.append((content, filename, upload.content_type))
    return images


@router.post("/upload")
async def upload_images(
    images: Annotated[list[UploadFile], File(description="Image files (jpg, png, webp, gif)")],
    folder: Annotated[str, Form(description="listings or articles")] = LISTINGS_FOLDER,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload one or more images.

    Returns the public URLs in upload order.
    """
    if folder not in ALLOWED_FOLDERS:
        raise InvalidQueryError(f"Invalid folder: {folder}", parameter="folder")

    files = await read_image_files(images)
    logger.info(f"Uploading {len(files)} images to '{folder}' for {user.email}")

    urls = StorageService.upload_images(files, folder)
    return success_response({"urls": urls}, message="Images uploaded successfully")
