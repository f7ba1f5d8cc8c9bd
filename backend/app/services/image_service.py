"""
Portfolio Backend — Cover Image Ingestion
===========================================

What:  Gates uploaded cover images by size and declared content type, and
       embeds accepted ones into the project record as a data URL.
How:   The upload arrives as an ImageUpload built by body_reader straight from
       the request stream, in memory only. Accepted bytes are base64-encoded
       and prefixed with the declared MIME type, verbatim.
Who:   body_reader builds uploads; ProjectService calls check() and embed().

Stored format:
    data:<declared-mime-type>;base64,<encoded-bytes>

    No content sniffing, no transcoding, no re-compression: the stored image
    is byte-for-byte what the client uploaded.
"""

import base64
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from app.config import settings
from app.exceptions import violation

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"

# What: Accepted declared content types (JPEG, PNG, WebP), case-insensitive
ALLOWED_CONTENT_TYPE = re.compile(r"^image/(jpe?g|png|webp)$", re.IGNORECASE)


@dataclass
class ImageUpload:
    """An uploaded file held in transient per-request memory."""
    content_type: str
    content: bytes
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


def size_violation(max_size: int) -> Dict[str, str]:
    """The violation reported for an image larger than max_size bytes."""
    max_mb = max_size / (1024 * 1024)
    return violation(IMAGE_FIELD, f"Image exceeds the maximum size of {max_mb:g} MB")


class ImageIngestor:
    """
    Upload gate + data-URL encoder for cover images.

    check() returns violations instead of raising, so the orchestrator can
    report image problems together with field problems in a single 400.
    """

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size or settings.max_image_size

    def check(self, upload: Optional[ImageUpload]) -> List[Dict[str, str]]:
        """Return the list of upload violations (empty when acceptable or absent)."""
        if upload is None:
            return []

        errors = []
        if not ALLOWED_CONTENT_TYPE.match(upload.content_type):
            errors.append(violation(IMAGE_FIELD, "Invalid image format (JPEG/PNG/WebP)"))
        if upload.size > self.max_size:
            errors.append(size_violation(self.max_size))
        if errors:
            logger.info(
                "Rejected upload: content_type=%s, size>=%d bytes",
                upload.content_type or "unknown",
                upload.size,
            )
        return errors

    def embed(self, upload: Optional[ImageUpload]) -> Optional[str]:
        """
        Encode an accepted upload as `data:<mime>;base64,<payload>`.

        Callers must have run check() first. Returns None when no upload is
        present, which leaves an existing cover image untouched on update.
        """
        if upload is None:
            return None
        encoded = base64.b64encode(upload.content).decode("ascii")
        return f"data:{upload.content_type};base64,{encoded}"


# ── Singleton Instance ────────────────────────────────────────────────────
image_ingestor = ImageIngestor()
