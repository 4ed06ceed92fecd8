# -----------------------------
# FILE SIZE LIMITS
# -----------------------------

MAX_UPLOAD_SIZE_MB = 10
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024

UPLOAD_TICKET_TTL_MINUTES = 60


# -----------------------------
# ALLOWED FILE EXTENSIONS
# (profile pictures, verification documents, gig images, deliverables)
# -----------------------------

ALLOWED_EXTENSIONS = {
    "pdf",
    "doc",
    "docx",
    "txt",
    "jpg",
    "jpeg",
    "png",
    "webp",
    "zip",
}

BLOCKED_EXTENSIONS = {
    "exe", "sh", "bat", "apk", "js", "py",
}


# -----------------------------
# MIME TYPES (secondary check)
# -----------------------------

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/zip",
    "application/x-zip-compressed",
}


def stored_file_upload_path(instance, filename):
    """
    Non-user-controlled prefix; the original name is kept on the row.
    """
    return f"uploads/{instance.uploaded_by_id}/{instance.id}/{filename}"
