import os
from rest_framework.exceptions import ValidationError
from apps.storage.constants import (
    MAX_UPLOAD_SIZE_BYTES,
    ALLOWED_EXTENSIONS,
    BLOCKED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
)


def validate_upload(file):
    if not file:
        raise ValidationError("File is required.")

    if file.size > MAX_UPLOAD_SIZE_BYTES:
        raise ValidationError(
            f"File too large. Max allowed size is {MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)} MB."
        )

    ext = os.path.splitext(file.name)[1].lower().replace(".", "")
    if not ext:
        raise ValidationError("File extension missing.")

    if ext in BLOCKED_EXTENSIONS:
        raise ValidationError("This file type is not allowed.")

    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Unsupported file format.")

    if file.content_type not in ALLOWED_MIME_TYPES:
        raise ValidationError("Invalid file content type.")

    return True
