"""
Profile picture storage on MinIO.

Images are validated, resized with Pillow to fit 500x500 and stored as
JPEG under ``profiles/`` in MINIO_UPLOADS_BUCKET.
"""
import io
import uuid

from django.conf import settings
from minio import Minio
from PIL import Image, UnidentifiedImageError

PROFILE_MAX_SIZE = (500, 500)


class InvalidImage(Exception):
    """Uploaded file is not a readable image."""


def is_storage_configured():
    return bool(settings.MINIO_ENDPOINT and settings.MINIO_ACCESS_KEY and settings.MINIO_SECRET_KEY)


def get_minio_client():
    """Get configured MinIO client instance."""
    return Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_USE_SSL,
    )


def resize_image(fileobj, max_size=PROFILE_MAX_SIZE):
    """
    Shrink an image to fit ``max_size`` (aspect ratio kept) and re-encode as JPEG.

    Returns:
        BytesIO positioned at 0.

    Raises:
        InvalidImage: if Pillow cannot decode the file
    """
    try:
        img = Image.open(fileobj)
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImage(str(e))

    # Convert to RGB if necessary
    if img.mode in ('RGBA', 'LA', 'P'):
        img = img.convert('RGB')

    img.thumbnail(max_size, Image.Resampling.LANCZOS)

    output = io.BytesIO()
    img.save(output, format='JPEG', quality=85)
    output.seek(0)
    return output


def generate_object_key(prefix, owner_id):
    return f'{prefix}/{owner_id}/{uuid.uuid4().hex[:12]}.jpg'


def public_url(object_key):
    base = settings.MINIO_PUBLIC_URL.rstrip('/')
    return f'{base}/{settings.MINIO_UPLOADS_BUCKET}/{object_key}'


def upload_image(data, object_key, client=None):
    """
    Put a JPEG into the uploads bucket, creating the bucket on first use.

    Returns:
        Public URL of the stored object.
    """
    client = client or get_minio_client()
    bucket = settings.MINIO_UPLOADS_BUCKET
    if not client.bucket_exists(bucket):
        client.make_bucket(bucket)

    size = data.getbuffer().nbytes
    client.put_object(bucket, object_key, data, length=size, content_type='image/jpeg')
    return public_url(object_key)
