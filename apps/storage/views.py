import logging
from django.db import transaction
from django.urls import reverse
from rest_framework import generics, permissions, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import StoredFile, UploadTicket
from .serializers import StoredFileSerializer
from .utils.file_validation import validate_upload

logger = logging.getLogger(__name__)


class GenerateUploadUrlView(APIView):
    """
    Step 1 of an upload: hand out a one-time URL the client posts the file to.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        ticket = UploadTicket.objects.create(user=request.user)
        upload_url = request.build_absolute_uri(
            reverse("storage-upload", kwargs={"token": ticket.token})
        )
        return Response(
            {"upload_url": upload_url, "expires_at": ticket.expires_at},
            status=status.HTTP_201_CREATED,
        )


class UploadFileView(APIView):
    """
    Step 2: the ticket in the URL is the credential, so no auth header needed.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, token):
        with transaction.atomic():
            ticket = (
                UploadTicket.objects.select_for_update()
                .filter(token=token)
                .first()
            )
            if ticket is None or not ticket.is_usable:
                raise NotFound("Upload URL is invalid or has expired.")

            upload = request.FILES.get("file")
            if upload is None:
                raise ValidationError({"file": "File is required."})
            validate_upload(upload)

            stored = StoredFile(
                uploaded_by=ticket.user,
                original_name=upload.name,
                content_type=upload.content_type,
                size=upload.size,
            )
            stored.file.save(upload.name, upload, save=False)
            stored.save()
            ticket.consume()

        logger.info("Stored file %s for user %s", stored.id, ticket.user_id)
        return Response({"storage_id": str(stored.id)}, status=status.HTTP_201_CREATED)


class StoredFileDetailView(generics.RetrieveAPIView):
    serializer_class = StoredFileSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = StoredFile.objects.all()
    lookup_field = "id"
