import logging
import mimetypes
import os
import uuid
from typing import Optional

from supabase import Client

logger = logging.getLogger(__name__)


def random_object_key(prefix: str, filename: str) -> str:
    """'{prefix}/{random}.{ext}' keeping the original file extension."""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower() or "bin"
    return f"{prefix}/{uuid.uuid4().hex[:12]}.{ext}"


def guess_content_type(filename: str, default: str = "application/octet-stream") -> str:
    return mimetypes.guess_type(filename or "")[0] or default


class BucketStorage:
    """One Supabase Storage bucket (public buckets: photos, tracks)."""

    def __init__(self, supabase: Client, bucket_name: str):
        if not bucket_name:
            raise ValueError("Storage bucket name must be configured")
        self.supabase = supabase
        self.bucket_name = bucket_name

    @property
    def _bucket(self):
        return self.supabase.storage.from_(self.bucket_name)

    def upload_file(self, file_content: bytes, key: str, content_type: Optional[str] = None,
                    upsert: bool = False) -> str:
        """Upload an object and return its key"""
        try:
            self._bucket.upload(
                key,
                file_content,
                {
                    "content-type": content_type or guess_content_type(key),
                    "upsert": "true" if upsert else "false",
                },
            )
            return key
        except Exception as e:
            logger.error(f"Failed to upload {key} to bucket {self.bucket_name}: {str(e)}")
            raise

    def delete_file(self, key: str) -> bool:
        """Delete an object; False when the storage API refused it"""
        try:
            self._bucket.remove([key])
            return True
        except Exception as e:
            logger.error(f"Failed to delete {key} from bucket {self.bucket_name}: {str(e)}")
            return False

    def public_url(self, key: str) -> str:
        url = self._bucket.get_public_url(key)
        # storage3 appends an empty query string on some versions
        return url.rstrip("?")
