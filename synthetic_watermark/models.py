from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from .config import MarkerDefaults

DEFAULTS = MarkerDefaults()


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class WatermarkRecord:
    """Fields shared by every synthetic-origin marker.

    ``timestamp`` is Unix epoch milliseconds. ``user_id_hash`` is an opaque,
    already hashed audit identifier and is carried verbatim.
    """

    platform: str
    source: str
    timestamp: int
    user_id_hash: Optional[str] = None

    def to_record(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class AudioWatermark(WatermarkRecord):
    @classmethod
    def with_defaults(
        cls,
        defaults: Optional[MarkerDefaults] = None,
        *,
        platform: Optional[str] = None,
        source: Optional[str] = None,
        timestamp: Optional[int] = None,
        user_id_hash: Optional[str] = None,
    ) -> "AudioWatermark":
        defaults = defaults or DEFAULTS
        return cls(
            platform=platform or defaults.platform,
            source=defaults.audio_source if source is None else source,
            timestamp=now_ms() if timestamp is None else int(timestamp),
            user_id_hash=user_id_hash,
        )


@dataclass(frozen=True, slots=True)
class ImageWatermark(WatermarkRecord):
    model: Optional[str] = None

    @classmethod
    def with_defaults(
        cls,
        defaults: Optional[MarkerDefaults] = None,
        *,
        platform: Optional[str] = None,
        source: Optional[str] = None,
        timestamp: Optional[int] = None,
        user_id_hash: Optional[str] = None,
        model: Optional[str] = None,
    ) -> "ImageWatermark":
        defaults = defaults or DEFAULTS
        return cls(
            platform=platform or defaults.platform,
            source=defaults.image_source if source is None else source,
            timestamp=now_ms() if timestamp is None else int(timestamp),
            user_id_hash=user_id_hash,
            model=model,
        )
