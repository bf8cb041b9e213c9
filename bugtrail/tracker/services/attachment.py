# ============================================
# tracker/services/attachment.py
# ============================================
"""
Append-only attachment history for projects and tickets.

The bytes go to Django's default storage first; the owning entity only
records the resulting {fileName, filePath} pair.
"""
import logging
import os
import time
from typing import Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_MIME_TYPES = ('image/png', 'image/jpeg', 'image/jpg', 'application/pdf')


def allowed_mime_types():
    return tuple(getattr(settings, 'TRACKER_ATTACHMENT_MIME_TYPES', DEFAULT_ALLOWED_MIME_TYPES))


def validate_upload(upload: UploadedFile) -> None:
    if upload.content_type not in allowed_mime_types():
        raise ValidationError("File type not allowed")


def store_upload(upload: UploadedFile) -> Dict[str, str]:
    """Write the file under the upload dir as '<epoch-ms>-<original name>'"""
    validate_upload(upload)

    upload_dir = getattr(settings, 'TRACKER_UPLOAD_DIR', 'uploads')
    original = get_valid_filename(os.path.basename(upload.name or 'attachment'))
    wanted = f"{int(time.time() * 1000)}-{original}"
    stored_path = default_storage.save(os.path.join(upload_dir, wanted), upload)

    logger.info("[attachment] stored %s (%s, %s bytes)", stored_path, upload.content_type, upload.size)
    return {
        'fileName': os.path.basename(stored_path),
        'filePath': stored_path,
    }


def append(entity, record: Dict[str, str], *, save: bool = True) -> None:
    """Add one record to the entity's history; earlier records are never touched"""
    entity.attachments = list(entity.attachments or []) + [record]
    if save:
        entity.save()


def append_upload(entity, upload: Optional[UploadedFile]) -> Optional[Dict[str, str]]:
    """Store the upload (if any) and append its record to the entity. Caller saves."""
    if upload is None:
        return None
    record = store_upload(upload)
    append(entity, record, save=False)
    return record


def warn_orphaned(record: Optional[Dict[str, str]], exc: Exception) -> None:
    if record:
        logger.warning("[attachment] %s left on disk, entity write failed: %s", record['filePath'], exc)
