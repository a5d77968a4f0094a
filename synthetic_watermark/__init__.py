"Synthetic-origin markers for PNG images and MP3 audio."

from importlib import metadata

from .id3 import detect_audio_watermark, embed_audio_watermark
from .models import AudioWatermark, ImageWatermark, WatermarkRecord
from .png import detect_image_watermark, embed_image_watermark

__all__ = [
    "__version__",
    "AudioWatermark",
    "ImageWatermark",
    "WatermarkRecord",
    "detect_audio_watermark",
    "detect_image_watermark",
    "embed_audio_watermark",
    "embed_image_watermark",
]


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return metadata.version("synthetic-watermark")
        except metadata.PackageNotFoundError:  # pragma: no cover - during editable dev installs
            return "0.0.0"
    raise AttributeError(name)
