# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles product image uploads to Supabase Storage.
# Images are stored flat in the bucket as <user_id>-<millis>.<ext> and
# listings reference them by public URL.
# =============================================================================

import logging
import os
import time
from uuid import UUID

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import ImageTooLargeError, InvalidImageError, StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles validating and uploading product images.
    """

    @staticmethod
    def validate_image(filename: str, size_bytes: int) -> str:
        """
        Check an image's extension and size.

        Returns:
            The lowercased extension, e.g. ".png"

        Raises:
            InvalidImageError: If the extension is not allowed
            ImageTooLargeError: If the image exceeds MAX_IMAGE_SIZE_MB
        """
        allowed = settings.allowed_image_extensions_list
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in allowed:
            raise InvalidImageError(filename, allowed)

        if size_bytes > settings.max_image_size_bytes:
            raise ImageTooLargeError(size_bytes / (1024 * 1024), settings.MAX_IMAGE_SIZE_MB)

        return ext

    @staticmethod
    def build_image_path(user_id: UUID | str, ext: str) -> str:
        """Storage path for a new image: <user_id>-<millis><ext>."""
        return f"{user_id}-{int(time.time() * 1000)}{ext}"

    @staticmethod
    def upload_product_image(
        user_id: UUID | str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """
        Upload a product image and return its storage path.

        Args:
            user_id: Uploading farmer's user id (prefixes the file name)
            filename: Original filename, used for its extension
            content: Image bytes
            content_type: MIME type sent by the client

        Returns:
            Path of the stored object, e.g. "<user_id>-1718000000000.png"

        Raises:
            InvalidImageError / ImageTooLargeError: If validation fails
            StorageUploadError: If upload fails
        """
        ext = StorageService.validate_image(filename, len(content))
        path = StorageService.build_image_path(user_id, ext)

        client = SupabaseClient.get_client()
        bucket = client.storage.from_(settings.PRODUCT_IMAGE_BUCKET)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type or "application/octet-stream"}
            )

        except Exception as e:
            logger.error(f"Image upload failed: {e}")
            raise StorageUploadError(str(e))

        logger.info(f"Uploaded product image to storage: {path}")
        return path

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """Public URL listings use to reference a stored image."""
        client = SupabaseClient.get_client()
        return client.storage.from_(settings.PRODUCT_IMAGE_BUCKET).get_public_url(storage_path)

    @staticmethod
    def delete_product_image(storage_path: str) -> bool:
        """
        Remove a stored image.

        Returns:
            True if deleted, False if storage refused
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.PRODUCT_IMAGE_BUCKET).remove([storage_path])
        except Exception as e:
            logger.error(f"Failed to delete product image {storage_path}: {e}")
            return False

        logger.info(f"Deleted product image from storage: {storage_path}")
        return True
