"""
Portfolio Backend — Request Body Reader
=========================================

What:  Turns a project request body (JSON object, urlencoded form or
       multipart form with an optional `image` file) into a raw field mapping
       plus an optional in-memory ImageUpload.
How:   The body is consumed from request.stream() chunk by chunk. Multipart
       is parsed with python-multipart callbacks into bounded bytearrays, so
       nothing is spooled to a temporary file. Every limit is enforced while
       reading: the stream is abandoned as soon as a part or body passes it.
Who:   Route handlers in routes/projects.py, after the AuthGate check.

Limits (400 on violation):
    JSON / urlencoded body    settings.max_body_size   (2 MiB)
    `image` file part         settings.max_image_size  (4 MiB)
    any other text part       MAX_FIELD_SIZE           (1 MiB)
    number of parts           MAX_PARTS

File parts other than `image` are drained without being kept.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import Request

from app.config import settings
from app.exceptions import ValidationError, violation
from app.services.image_service import IMAGE_FIELD, ImageUpload, size_violation

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
URLENCODED_MEDIA_TYPE = "application/x-www-form-urlencoded"
MULTIPART_MEDIA_TYPE = "multipart/form-data"

MAX_FIELD_SIZE = 1024 * 1024
MAX_PARTS = 1000

Fields = Dict[str, Any]


def body_too_large(limit: int) -> ValidationError:
    return ValidationError.for_field(
        "body", f"Request body exceeds the maximum size of {limit / (1024 * 1024):g} MB"
    )


async def read_bounded(request: Request, limit: int) -> bytes:
    """Read the whole body, failing as soon as it passes `limit` bytes."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise body_too_large(limit)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise body_too_large(limit)
    return bytes(body)


def collapse(pairs: List[Tuple[str, str]]) -> Fields:
    """Repeated keys become lists (tech=A&tech=B); single keys stay scalar."""
    grouped: Dict[str, List[str]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    return {key: values if len(values) > 1 else values[0] for key, values in grouped.items()}


# ══════════════════════════════════════════════════════════════════════════
# Multipart
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class _Part:
    name: str = ""
    filename: Optional[str] = None
    content_type: str = ""
    data: bytearray = field(default_factory=bytearray)

    @property
    def is_file(self) -> bool:
        return self.filename is not None


class MultipartReader:
    """
    Incremental multipart/form-data reader that keeps everything in memory.

    Feed it body chunks with feed(), then call finish(). Text parts end up in
    `pairs`, the first `image` file part in `upload`.
    """

    def __init__(
        self,
        boundary: bytes,
        max_image_size: int,
        max_field_size: int = MAX_FIELD_SIZE,
        max_parts: int = MAX_PARTS,
    ):
        self.max_image_size = max_image_size
        self.max_field_size = max_field_size
        self.max_parts = max_parts

        self.pairs: List[Tuple[str, str]] = []
        self.upload: Optional[ImageUpload] = None

        self._part = _Part()
        self._part_count = 0
        self._headers: Dict[bytes, bytes] = {}
        self._header_field = bytearray()
        self._header_value = bytearray()

        self._parser = MultipartParser(
            boundary,
            {
                "on_part_begin": self.on_part_begin,
                "on_part_data": self.on_part_data,
                "on_part_end": self.on_part_end,
                "on_header_field": self.on_header_field,
                "on_header_value": self.on_header_value,
                "on_header_end": self.on_header_end,
                "on_headers_finished": self.on_headers_finished,
            },
        )

    def feed(self, chunk: bytes) -> None:
        try:
            self._parser.write(chunk)
        except MultipartParseError as e:
            raise ValidationError.for_field("body", "Malformed multipart body") from e

    def finish(self) -> None:
        try:
            self._parser.finalize()
        except MultipartParseError as e:
            raise ValidationError.for_field("body", "Malformed multipart body") from e

    # ── python-multipart callbacks ────────────────────────────────────────

    def on_part_begin(self) -> None:
        self._part_count += 1
        if self._part_count > self.max_parts:
            raise ValidationError.for_field("body", f"Too many form parts (max {self.max_parts})")
        self._part = _Part()
        self._headers = {}

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field.extend(data[start:end])

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value.extend(data[start:end])

    def on_header_end(self) -> None:
        self._headers[bytes(self._header_field).lower()] = bytes(self._header_value)
        self._header_field.clear()
        self._header_value.clear()

    def on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        self._part.name = options.get(b"name", b"").decode("utf-8", errors="replace")
        filename = options.get(b"filename")
        if filename is not None:
            self._part.filename = filename.decode("utf-8", errors="replace")
        self._part.content_type = self._headers.get(b"content-type", b"").decode("latin-1")

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        part = self._part
        if part.is_file and (part.name != IMAGE_FIELD or self.upload is not None):
            return

        chunk = data[start:end]
        if part.is_file:
            if len(part.data) + len(chunk) > self.max_image_size:
                logger.info("Aborted upload: image part exceeds %d bytes", self.max_image_size)
                raise ValidationError(errors=[size_violation(self.max_image_size)])
        elif len(part.data) + len(chunk) > self.max_field_size:
            raise ValidationError(errors=[violation(part.name, f"{part.name} is too large")])
        part.data.extend(chunk)

    def on_part_end(self) -> None:
        part = self._part
        if not part.is_file:
            self.pairs.append((part.name, part.data.decode("utf-8", errors="replace")))
            return
        if part.name != IMAGE_FIELD or self.upload is not None:
            return
        # An untouched <input type="file"> sends an empty, unnamed part
        if not part.data and not part.filename:
            return
        self.upload = ImageUpload(
            content_type=part.content_type,
            content=bytes(part.data),
            filename=part.filename or "",
        )


# ══════════════════════════════════════════════════════════════════════════
# Entry point
# ══════════════════════════════════════════════════════════════════════════

async def parse_project_body(
    request: Request,
    max_image_size: Optional[int] = None,
    max_body_size: Optional[int] = None,
) -> Tuple[Fields, Optional[ImageUpload]]:
    """
    Read the request body into (fields, upload).

    Unsupported or missing content types yield an empty mapping, which the
    validator then reports field by field.

    Raises:
        ValidationError: malformed or oversized body, a JSON body that is not
                         an object, or an image part over max_image_size
    """
    max_image_size = max_image_size or settings.max_image_size
    max_body_size = max_body_size or settings.max_body_size

    media_type, options = parse_options_header(request.headers.get("content-type", ""))
    media_type = media_type.decode("latin-1").lower()

    if media_type == JSON_MEDIA_TYPE:
        raw = await read_bounded(request, max_body_size)
        try:
            body = json.loads(raw)
        except ValueError:
            raise ValidationError.for_field("body", "Malformed JSON body")
        if not isinstance(body, dict):
            raise ValidationError.for_field("body", "Request body must be a JSON object")
        return body, None

    if media_type == URLENCODED_MEDIA_TYPE:
        raw = await read_bounded(request, max_body_size)
        pairs = parse_qsl(raw.decode("utf-8", errors="replace"), keep_blank_values=True)
        return collapse(pairs), None

    if media_type == MULTIPART_MEDIA_TYPE:
        boundary = options.get(b"boundary")
        if not boundary:
            raise ValidationError.for_field("body", "Missing multipart boundary")
        reader = MultipartReader(boundary, max_image_size)
        async for chunk in request.stream():
            reader.feed(chunk)
        reader.finish()
        return collapse(reader.pairs), reader.upload

    return {}, None
