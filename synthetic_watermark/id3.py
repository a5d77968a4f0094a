"""MP3 codec: prepends an ID3v2.3 tag holding a single ``COMM`` frame.

The new tag replaces a well-formed leading ID3v2 tag instead of stacking on
top of it. Detection is a substring search over the raw bytes, not a frame
walk: marker text inside an unrelated frame matches too.
"""

from __future__ import annotations

import logging
import struct
from typing import Optional

from .config import MarkerDefaults
from .errors import MalformedContainerError, MarkerNotFoundError, WatermarkError
from .formats import ContainerFormat
from .marker import AUDIO_MARKER, COMMENT_DESCRIPTION, format_audio_marker, parse_audio_marker
from .models import AudioWatermark
from .results import DetectResult, EmbedResult

logger = logging.getLogger(__name__)

ID3_MAGIC = b"ID3"
HEADER_SIZE = 10
MAJOR_VERSION = 3
REVISION = 0
COMM = b"COMM"
ENCODING_LATIN1 = 0x00
LANGUAGE = b"eng"
SYNCSAFE_LIMIT = 1 << 28

_FRAME_HEADER = struct.Struct(">4sIH")


def has_tag(data: bytes) -> bool:
    return len(data) >= HEADER_SIZE and data[:3] == ID3_MAGIC


def decode_syncsafe(raw: bytes) -> int:
    value = 0
    for byte in raw[:4]:
        value = (value << 7) | (byte & 0x7F)
    return value


def encode_syncsafe(value: int) -> bytes:
    if not 0 <= value < SYNCSAFE_LIMIT:
        raise ValueError(f"{value} does not fit in a 28-bit syncsafe integer")
    return bytes((value >> shift) & 0x7F for shift in (21, 14, 7, 0))


def tag_size(data: bytes) -> int:
    """Total span of the leading ID3v2 tag, header included; 0 when absent."""
    if not has_tag(data):
        return 0
    return decode_syncsafe(data[6:10]) + HEADER_SIZE


def build_comment_frame(record: AudioWatermark) -> bytes:
    text = format_audio_marker(record)
    body = b"".join(
        [
            bytes([ENCODING_LATIN1]),
            LANGUAGE,
            COMMENT_DESCRIPTION.encode("latin-1") + b"\x00",
            text.encode("utf-8") + b"\x00",
        ]
    )
    return _FRAME_HEADER.pack(COMM, len(body), 0) + body


def build_watermark_tag(record: AudioWatermark) -> bytes:
    frame = build_comment_frame(record)
    header = ID3_MAGIC + bytes([MAJOR_VERSION, REVISION, 0]) + encode_syncsafe(len(frame))
    return header + frame


def try_embed(
    data: bytes,
    fmt: str = "mp3",
    *,
    defaults: Optional[MarkerDefaults] = None,
    platform: Optional[str] = None,
    source: Optional[str] = None,
    timestamp: Optional[int] = None,
    user_id_hash: Optional[str] = None,
) -> EmbedResult:
    original = bytes(data)
    if ContainerFormat.for_audio(fmt) is not ContainerFormat.MP3:
        return EmbedResult.passthrough(original, f"unsupported audio format {fmt!r}")
    try:
        record = AudioWatermark.with_defaults(
            defaults,
            platform=platform,
            source=source,
            timestamp=timestamp,
            user_id_hash=user_id_hash,
        )
        tag = build_watermark_tag(record)
    except (WatermarkError, ValueError, TypeError, OverflowError) as exc:
        logger.debug("MP3 watermark not embedded: %s", exc)
        return EmbedResult.passthrough(original, str(exc))
    audio = original
    if has_tag(original):
        existing = tag_size(original)
        if existing <= len(original):
            audio = original[existing:]
        else:
            logger.debug(
                "Existing ID3 tag claims %d bytes of a %d byte buffer; keeping it",
                existing,
                len(original),
            )
    return EmbedResult(data=tag + audio, embedded=True)


def embed_audio_watermark(data: bytes, fmt: str = "mp3", **fields) -> bytes:
    """Return ``data`` with a synthetic-origin ID3v2.3 tag in front.

    Formats other than ``mp3`` are returned unchanged. Keyword fields are
    those of :meth:`AudioWatermark.with_defaults` plus ``defaults``.
    """
    return try_embed(data, fmt, **fields).data


def _marker_text(data: bytes) -> str:
    description = COMMENT_DESCRIPTION.encode("latin-1")
    idx = data.find(description)
    if idx == -1:
        raise MarkerNotFoundError(f"no {COMMENT_DESCRIPTION} comment")
    search_from = idx + len(description) + 1
    if search_from >= len(data):
        raise MalformedContainerError("comment ends at end of buffer")
    start = data.find(AUDIO_MARKER.encode("latin-1"), search_from)
    if start == -1:
        raise MarkerNotFoundError("comment carries no audio marker")
    end = data.find(b"\x00", start)
    if end == -1:
        end = len(data)
    return data[start:end].decode("utf-8")


def try_detect(data: bytes) -> DetectResult[AudioWatermark]:
    data = bytes(data)
    if not has_tag(data):
        return DetectResult.not_found("no ID3v2 tag")
    try:
        return DetectResult(record=parse_audio_marker(_marker_text(data)))
    except (WatermarkError, ValueError) as exc:
        logger.debug("No MP3 watermark: %s", exc)
        return DetectResult.not_found(str(exc))


def detect_audio_watermark(data: bytes) -> Optional[AudioWatermark]:
    return try_detect(data).record
