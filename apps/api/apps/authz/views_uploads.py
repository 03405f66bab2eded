"""
Profile picture upload (MinIO).
"""
import logging

from django.conf import settings
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.models import AuditActionChoices, ResourceTypeChoices
from apps.audit.services import log_audit
from apps.core.exceptions import UploadNotConfigured
from . import storage

logger = logging.getLogger(__name__)


def validate_image_upload(upload):
    if upload is None:
        raise ValidationError('No file provided')
    if upload.content_type not in settings.UPLOAD_ALLOWED_CONTENT_TYPES:
        raise ValidationError('Invalid file type. Only JPEG, PNG, and WebP are allowed.')
    if upload.size > settings.UPLOAD_MAX_BYTES:
        raise ValidationError('File too large. Maximum size is 5 MB.')


class ProfilePictureUploadView(APIView):
    """
    POST /api/uploads/profile/ (multipart, field ``profilePicture``)

    503 upload_not_configured when MinIO credentials are missing.
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        if not storage.is_storage_configured():
            raise UploadNotConfigured()

        upload = request.FILES.get('profilePicture')
        validate_image_upload(upload)

        try:
            image = storage.resize_image(upload)
        except storage.InvalidImage:
            raise ValidationError('Uploaded file is not a valid image')

        object_key = storage.generate_object_key('profiles', request.user.pk)
        url = storage.upload_image(image, object_key)

        user = request.user
        user.profile_picture = url
        user.save(update_fields=['profile_picture', 'updated_at'])

        log_audit(
            AuditActionChoices.PROFILE_PICTURE_UPLOADED,
            user=user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user.pk,
            details={'objectKey': object_key, 'fileSize': upload.size},
            request=request,
        )
        return Response({'success': True, 'url': url, 'objectKey': object_key})
