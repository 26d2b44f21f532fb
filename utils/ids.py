"""
Identifier and storage key generation.

Ids embed a millisecond timestamp plus a random suffix, so two
uploads to the same gallery in the same millisecond still differ.
"""

import mimetypes
import os
import time
import uuid


def unique_suffix() -> str:
    """<epochMillis>-<12 hex chars>"""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


def new_gallery_id() -> str:
    return f"gallery-{unique_suffix()}"


def new_photo_id() -> str:
    return f"photo-{unique_suffix()}"


def file_extension(file_name: str, mime_type: str = None) -> str:
    """
    Extension without the dot, lowercased.

    Falls back to the MIME type, then to "bin".
    """
    ext = os.path.splitext(file_name or "")[1].lower().lstrip(".")
    if ext:
        return ext
    guessed = mimetypes.guess_extension(mime_type or "") if mime_type else None
    if guessed:
        return guessed.lstrip(".")
    return "bin"


def photo_storage_path(admin_id: str, gallery_id: str, file_name: str, mime_type: str = None) -> str:
    """Blob key: <adminId>/<galleryId>/<timestamp>-<random>.<ext>"""
    return f"{admin_id}/{gallery_id}/{unique_suffix()}.{file_extension(file_name, mime_type)}"
