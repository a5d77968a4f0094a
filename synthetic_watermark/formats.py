from __future__ import annotations

from enum import Enum


class ContainerFormat(Enum):
    PNG = "png"
    MP3 = "mp3"
    UNSUPPORTED = "unsupported"

    @classmethod
    def for_image(cls, value: str) -> "ContainerFormat":
        normalized = (value or "").lower().replace("image/", "", 1)
        if normalized == cls.PNG.value:
            return cls.PNG
        return cls.UNSUPPORTED

    @classmethod
    def for_audio(cls, value: str) -> "ContainerFormat":
        if (value or "").lower() == cls.MP3.value:
            return cls.MP3
        return cls.UNSUPPORTED

    @classmethod
    def from_suffix(cls, suffix: str) -> "ContainerFormat":
        match suffix.lower():
            case ".png":
                return cls.PNG
            case ".mp3":
                return cls.MP3
            case _:
                return cls.UNSUPPORTED
