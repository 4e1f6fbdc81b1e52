"""Object storage helpers for uploaded document files."""

import asyncio
import logging

from supabase import Client

logger = logging.getLogger(__name__)


async def bucket_exists(client: Client, bucket_name: str) -> bool:
    """Return True if a bucket with this name exists."""
    try:
        buckets = await asyncio.to_thread(client.storage.list_buckets)
    except Exception as e:
        raise RuntimeError(f"Failed to list buckets: {str(e)}") from e
    return any(getattr(b, 'name', None) == bucket_name for b in (buckets or []))


async def ensure_bucket(client: Client, bucket_name: str) -> bool:
    """Create the bucket as public if it does not exist.

    Returns:
        bool: True if the bucket was created, False if it already existed

    Raises:
        RuntimeError: If listing or creating buckets fails
    """
    if await bucket_exists(client, bucket_name):
        return False

    try:
        await asyncio.to_thread(
            lambda: client.storage.create_bucket(bucket_name, options={'public': True})
        )
    except Exception as e:
        raise RuntimeError(f"Failed to create bucket: {str(e)}") from e

    logger.info(f"Created storage bucket '{bucket_name}'")
    return True


async def upload_file(
    client: Client,
    bucket_name: str,
    path: str,
    content: bytes,
    content_type: str,
) -> str:
    """Upload bytes to ``path`` and return the file's public URL.

    Raises:
        RuntimeError: If the upload fails
    """
    try:
        await asyncio.to_thread(
            lambda: client.storage.from_(bucket_name).upload(
                path,
                content,
                file_options={
                    'content-type': content_type,
                    'cache-control': '3600',
                    'upsert': 'false',
                },
            )
        )
    except Exception as e:
        raise RuntimeError(f"Error uploading file: {str(e)}") from e

    return str(client.storage.from_(bucket_name).get_public_url(path))


async def download_file(client: Client, bucket_name: str, path: str) -> bytes:
    """Download a stored file.

    Raises:
        RuntimeError: If the download fails
    """
    try:
        data: bytes = await asyncio.to_thread(
            lambda: client.storage.from_(bucket_name).download(path)
        )
        return data
    except Exception as e:
        raise RuntimeError(f"Error downloading document: {str(e)}") from e


async def remove_file(client: Client, bucket_name: str, path: str) -> bool:
    """Remove a stored file. Failures are logged and reported as False."""
    try:
        await asyncio.to_thread(
            lambda: client.storage.from_(bucket_name).remove([path])
        )
        return True
    except Exception as e:
        logger.error(f"Error deleting file from storage: {e}")
        return False
