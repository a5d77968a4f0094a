"""Positional, ``|``-delimited marker text shared by the PNG and MP3 codecs.

Image: ``SYNTHETIC_IMAGE|platform|source|timestamp|user_id_hash|model``
Audio: ``SYNTHETIC_AUDIO|platform|source|timestamp[|user_id_hash]``

Optional fields keep their slot as an empty string in the image form, and an
empty slot parses back to ``None``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .errors import MarkerDecodeError, MarkerEncodeError
from .models import AudioWatermark, ImageWatermark

DELIMITER = "|"
IMAGE_PREFIX = "SYNTHETIC_IMAGE"
AUDIO_PREFIX = "SYNTHETIC_AUDIO"
IMAGE_MARKER = IMAGE_PREFIX + DELIMITER
AUDIO_MARKER = AUDIO_PREFIX + DELIMITER

# PNG iTXt keyword and ID3 COMM short description.
ITXT_KEYWORD = "SyntheticOrigin"
COMMENT_DESCRIPTION = "SYNTHETIC_ORIGIN"

MIN_FIELDS = 4


def _join(fields: Iterable[str]) -> str:
    values = list(fields)
    for value in values[1:]:
        if DELIMITER in value or "\x00" in value:
            raise MarkerEncodeError(f"marker field {value!r} contains a delimiter or NUL byte")
    return DELIMITER.join(values)


def _split(text: str, prefix: str) -> List[str]:
    if not text.startswith(prefix + DELIMITER):
        raise MarkerDecodeError(f"text does not start with {prefix}")
    parts = text.split(DELIMITER)
    if len(parts) < MIN_FIELDS:
        raise MarkerDecodeError(f"expected at least {MIN_FIELDS} fields, got {len(parts)}")
    return parts


def _timestamp(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise MarkerDecodeError(f"invalid timestamp {value!r}") from exc


def _optional(parts: List[str], index: int) -> Optional[str]:
    if index < len(parts) and parts[index]:
        return parts[index]
    return None


def format_image_marker(record: ImageWatermark) -> str:
    return _join(
        [
            IMAGE_PREFIX,
            record.platform,
            record.source,
            str(record.timestamp),
            record.user_id_hash or "",
            record.model or "",
        ]
    )


def parse_image_marker(text: str) -> ImageWatermark:
    parts = _split(text, IMAGE_PREFIX)
    return ImageWatermark(
        platform=parts[1],
        source=parts[2],
        timestamp=_timestamp(parts[3]),
        user_id_hash=_optional(parts, 4),
        model=_optional(parts, 5),
    )


def format_audio_marker(record: AudioWatermark) -> str:
    fields = [AUDIO_PREFIX, record.platform, record.source, str(record.timestamp)]
    if record.user_id_hash:
        fields.append(record.user_id_hash)
    return _join(fields)


def parse_audio_marker(text: str) -> AudioWatermark:
    parts = _split(text, AUDIO_PREFIX)
    return AudioWatermark(
        platform=parts[1],
        source=parts[2],
        timestamp=_timestamp(parts[3]),
        user_id_hash=_optional(parts, 4),
    )
