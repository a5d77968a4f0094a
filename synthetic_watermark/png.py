"""PNG codec: splices an ``iTXt`` chunk carrying the marker in front of ``IEND``.

Chunk layout: 4-byte big-endian body length, 4-byte type, body, 4-byte
big-endian CRC-32 over type and body (the length field is not covered).
"""

from __future__ import annotations

import logging
import struct
from typing import Iterator, Optional, Tuple

from .config import MarkerDefaults
from .crc import crc32
from .errors import (
    MalformedContainerError,
    MarkerDecodeError,
    MarkerNotFoundError,
    WatermarkError,
)
from .formats import ContainerFormat
from .marker import IMAGE_MARKER, ITXT_KEYWORD, format_image_marker, parse_image_marker
from .models import ImageWatermark
from .results import DetectResult, EmbedResult

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
ITXT = b"iTXt"
IEND = b"IEND"
LANGUAGE_TAG = b"en"
MIN_DETECT_LENGTH = 20

_CHUNK_HEADER = struct.Struct(">I4s")
_CRC = struct.Struct(">I")


def is_png(data: bytes) -> bool:
    return len(data) >= len(PNG_SIGNATURE) and data[: len(PNG_SIGNATURE)] == PNG_SIGNATURE


def find_iend_offset(data: bytes) -> Optional[int]:
    """Offset of the ``IEND`` chunk's length field, i.e. where new chunks go."""
    start = len(PNG_SIGNATURE)
    type_pos = data.find(IEND, start + 4)
    if type_pos == -1:
        return None
    offset = type_pos - 4
    if offset >= len(data) - 8:
        return None
    return offset


def build_itxt_body(keyword: str, text: str) -> bytes:
    return b"".join(
        [
            keyword.encode("latin-1") + b"\x00",
            b"\x00",  # compression flag: uncompressed
            b"\x00",  # compression method
            LANGUAGE_TAG + b"\x00",
            b"\x00",  # empty translated keyword
            text.encode("utf-8"),
        ]
    )


def build_chunk(chunk_type: bytes, body: bytes) -> bytes:
    checksum = crc32(chunk_type + body)
    return _CHUNK_HEADER.pack(len(body), chunk_type) + body + _CRC.pack(checksum)


def build_metadata_chunk(record: ImageWatermark) -> bytes:
    text = format_image_marker(record)
    return build_chunk(ITXT, build_itxt_body(ITXT_KEYWORD, text))


def iter_chunks(data: bytes) -> Iterator[Tuple[bytes, bytes]]:
    """Yield ``(chunk_type, body)`` pairs, stopping after ``IEND``.

    Truncated trailing chunks yield a short body rather than raising; the CRC
    is not verified.
    """
    pos = len(PNG_SIGNATURE)
    while pos < len(data) - 12:
        length, chunk_type = _CHUNK_HEADER.unpack_from(data, pos)
        body_start = pos + _CHUNK_HEADER.size
        yield chunk_type, data[body_start : body_start + length]
        pos = body_start + length + _CRC.size
        if chunk_type == IEND:
            break


def _marker_in_chunk(body: bytes) -> Optional[ImageWatermark]:
    text = body.decode("utf-8", errors="replace")
    if ITXT_KEYWORD not in text or IMAGE_MARKER not in text:
        return None
    return parse_image_marker(text[text.index(IMAGE_MARKER) :])


def try_embed(
    data: bytes,
    fmt: str = "png",
    *,
    defaults: Optional[MarkerDefaults] = None,
    platform: Optional[str] = None,
    source: Optional[str] = None,
    timestamp: Optional[int] = None,
    user_id_hash: Optional[str] = None,
    model: Optional[str] = None,
) -> EmbedResult:
    original = bytes(data)
    if ContainerFormat.for_image(fmt) is not ContainerFormat.PNG:
        return EmbedResult.passthrough(original, f"unsupported image format {fmt!r}")
    try:
        if not is_png(original):
            raise MalformedContainerError("PNG signature mismatch")
        offset = find_iend_offset(original)
        if offset is None:
            raise MalformedContainerError("IEND chunk not found")
        record = ImageWatermark.with_defaults(
            defaults,
            platform=platform,
            source=source,
            timestamp=timestamp,
            user_id_hash=user_id_hash,
            model=model,
        )
        chunk = build_metadata_chunk(record)
    except (WatermarkError, ValueError, TypeError, OverflowError) as exc:
        logger.debug("PNG watermark not embedded: %s", exc)
        return EmbedResult.passthrough(original, str(exc))
    return EmbedResult(data=original[:offset] + chunk + original[offset:], embedded=True)


def embed_image_watermark(data: bytes, fmt: str = "png", **fields) -> bytes:
    """Return a copy of ``data`` carrying an ``iTXt`` synthetic-origin marker.

    Non-PNG formats, buffers that are not PNG, and files without an ``IEND``
    chunk come back unchanged. Keyword fields are those of
    :meth:`ImageWatermark.with_defaults` plus ``defaults``.
    """
    return try_embed(data, fmt, **fields).data


def try_detect(data: bytes) -> DetectResult[ImageWatermark]:
    data = bytes(data)
    if not is_png(data) or len(data) < MIN_DETECT_LENGTH:
        return DetectResult.not_found("not a PNG buffer")
    corrupt: Optional[MarkerDecodeError] = None
    try:
        for chunk_type, body in iter_chunks(data):
            if chunk_type != ITXT:
                continue
            try:
                record = _marker_in_chunk(body)
            except MarkerDecodeError as exc:
                corrupt = exc
                continue
            if record is not None:
                return DetectResult(record=record)
        if corrupt is not None:
            raise corrupt
        raise MarkerNotFoundError("no synthetic-origin iTXt chunk")
    except (WatermarkError, struct.error, ValueError) as exc:
        logger.debug("No PNG watermark: %s", exc)
        return DetectResult.not_found(str(exc))


def detect_image_watermark(data: bytes) -> Optional[ImageWatermark]:
    return try_detect(data).record
