"""S3-compatible object storage for uploaded submission files.

Keys are laid out as ``<folder>/<uuid4>.<ext>``, e.g.::

    assignment-submissions/0b0f...9e.pdf
    quiz-submissions/77c1...04.docx
"""
import logging
import mimetypes
import uuid

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class FileTooLarge(StorageError):
    pass


class ObjectStorage:
    def __init__(self, bucket_name, client, public_base_url="", max_bytes=50 * 1024 * 1024):
        self.bucket_name = bucket_name
        self.client = client
        self.public_base_url = (public_base_url or "").rstrip("/")
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls, config):
        client = boto3.client(
            "s3",
            endpoint_url=config.get("S3_ENDPOINT_URL"),
            region_name=config.get("S3_REGION"),
            aws_access_key_id=config.get("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=config.get("AWS_SECRET_ACCESS_KEY"),
        )
        return cls(config["S3_BUCKET_NAME"], client,
                   public_base_url=config.get("S3_PUBLIC_BASE_URL", ""),
                   max_bytes=config.get("MAX_UPLOAD_BYTES", 50 * 1024 * 1024))

    @staticmethod
    def make_key(filename, folder):
        _, dot, ext = (filename or "").rpartition(".")
        suffix = f".{ext.lower()}" if dot and ext else ""
        return f"{folder}/{uuid.uuid4()}{suffix}"

    def upload(self, file, folder):
        """Upload a Werkzeug ``FileStorage`` (or any object with ``read``) and return its key."""
        data = file.read()
        if len(data) > self.max_bytes:
            raise FileTooLarge(f"File size exceeds the limit of {self.max_bytes} bytes.")
        filename = getattr(file, "filename", None)
        key = self.make_key(filename, folder)
        content_type = (getattr(file, "mimetype", None)
                        or mimetypes.guess_type(filename or "")[0]
                        or "application/octet-stream")
        try:
            self.client.put_object(Bucket=self.bucket_name, Key=key, Body=data,
                                   ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to upload %s to bucket %s: %s", key, self.bucket_name, e)
            raise StorageError(f"Upload failed: {e}") from e
        logger.info("Uploaded %s (%d bytes)", key, len(data))
        return key

    def public_url(self, key):
        if not self.public_base_url:
            return key
        return f"{self.public_base_url}/{key}"
