"""
Storage Utility
===============

Blob storage for uploaded images and documents, with a local static-folder
backend and a DigitalOcean Spaces (S3-compatible) backend.

Both backends store into one fixed bucket and expose the same two calls:
upload(path, data, overwrite) and public_url(path).
"""

import logging
import os
import secrets
import string

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase

CONTENT_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
    'pdf': 'application/pdf',
}


class StorageError(Exception):
    """Raised when the blob store rejects an operation.

    ``message`` carries the backend's own wording when one was returned.
    """

    def __init__(self, message=None):
        super().__init__(message or 'Storage operation failed')
        self.message = message


def base36_token(nbytes=8):
    """Random lowercase base-36 token (about 13 chars for 8 bytes)"""
    value = int.from_bytes(secrets.token_bytes(nbytes), 'big')
    if value == 0:
        return '0'
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return ''.join(reversed(digits))


def guess_content_type(path):
    ext = path.rsplit('.', 1)[-1].lower() if '.' in path else ''
    return CONTENT_TYPES.get(ext, 'application/octet-stream')


def _check_path(path):
    if not path or path.startswith('/') or '\\' in path or '..' in path.split('/'):
        raise StorageError(f"Invalid object path: {path!r}")


class LocalBlobStore:
    """Save to the app's static folder under a bucket subfolder."""

    def __init__(self, static_folder, bucket, url_prefix='/static'):
        self.root = os.path.join(static_folder, bucket)
        self.bucket = bucket
        self.url_prefix = url_prefix.rstrip('/')

    def upload(self, path, data, overwrite=False, content_type=None):
        _check_path(path)
        filepath = os.path.join(self.root, path)
        os.makedirs(os.path.dirname(filepath), exist_ok=True)

        # 'xb' fails atomically if the object already exists
        mode = 'wb' if overwrite else 'xb'
        try:
            with open(filepath, mode) as f:
                f.write(data)
        except FileExistsError:
            raise StorageError('The resource already exists')
        except OSError as e:
            raise StorageError(str(e)) from e

        logger.info("Stored %d bytes at %s", len(data), filepath)
        return path

    def public_url(self, path):
        return f"{self.url_prefix}/{self.bucket}/{path}"


class SpacesBlobStore:
    """Upload to DigitalOcean Spaces via boto3."""

    def __init__(self, region, space_name, access_key, secret_key, folder='uploads', client=None):
        self.region = region
        self.space_name = space_name
        self.folder = folder.strip('/')
        self._client = client
        self._credentials = (access_key, secret_key)

    @property
    def client(self):
        if self._client is None:
            import boto3
            access_key, secret_key = self._credentials
            self._client = boto3.client(
                's3',
                region_name=self.region,
                endpoint_url=f"https://{self.region}.digitaloceanspaces.com",
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )
        return self._client

    def _key(self, path):
        return f"{self.folder}/{path}" if self.folder else path

    @staticmethod
    def _error_message(error):
        response = getattr(error, 'response', None) or {}
        return response.get('Error', {}).get('Message') or str(error)

    def _exists(self, key):
        from botocore.exceptions import ClientError
        try:
            self.client.head_object(Bucket=self.space_name, Key=key)
            return True
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code')
            if code in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise StorageError(self._error_message(e)) from e

    def upload(self, path, data, overwrite=False, content_type=None):
        from botocore.exceptions import BotoCoreError, ClientError

        _check_path(path)
        key = self._key(path)
        if not overwrite and self._exists(key):
            raise StorageError('The resource already exists')

        try:
            self.client.put_object(
                Bucket=self.space_name,
                Key=key,
                Body=data,
                ACL='public-read',
                ContentType=content_type or guess_content_type(path),
            )
        except ClientError as e:
            raise StorageError(self._error_message(e)) from e
        except BotoCoreError as e:
            raise StorageError(str(e)) from e

        logger.info("Uploaded %d bytes to %s/%s", len(data), self.space_name, key)
        return path

    def public_url(self, path):
        return f"https://{self.space_name}.{self.region}.digitaloceanspaces.com/{self._key(path)}"


def create_blob_store(app):
    """Build the configured blob store for a Flask app"""
    storage_type = app.config.get('STORAGE_TYPE', 'local')
    bucket = app.config.get('STORAGE_BUCKET', 'images')

    if storage_type == 'cloud':
        return SpacesBlobStore(
            region=app.config.get('DO_SPACES_REGION'),
            space_name=app.config.get('DO_SPACES_NAME'),
            access_key=app.config.get('DO_SPACES_KEY'),
            secret_key=app.config.get('DO_SPACES_SECRET'),
            folder=f"{app.config.get('SPACES_FOLDER', 'uploads')}/{bucket}",
        )
    return LocalBlobStore(app.static_folder, bucket)
