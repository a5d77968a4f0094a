import dataclasses
import time
import unittest

from synthetic_watermark.config import MarkerDefaults
from synthetic_watermark.models import AudioWatermark, ImageWatermark


class TestWatermarkModels(unittest.TestCase):
    def test_records_are_immutable(self) -> None:
        record = ImageWatermark(platform="P", source="s", timestamp=1)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            record.source = "other"  # type: ignore[misc]

    def test_image_defaults(self) -> None:
        before = int(time.time() * 1000)
        record = ImageWatermark.with_defaults()
        after = int(time.time() * 1000)
        self.assertEqual(record.platform, "SYNTHETIC")
        self.assertEqual(record.source, "ai_generated")
        self.assertTrue(before <= record.timestamp <= after)
        self.assertIsNone(record.user_id_hash)
        self.assertIsNone(record.model)

    def test_audio_defaults(self) -> None:
        record = AudioWatermark.with_defaults(timestamp=5)
        self.assertEqual(record, AudioWatermark(platform="SYNTHETIC", source="tts", timestamp=5))

    def test_caller_values_override_configured_defaults(self) -> None:
        defaults = MarkerDefaults(platform="ACME", image_source="diffusion", audio_source="voice")
        record = ImageWatermark.with_defaults(defaults, source="dalle", timestamp=9)
        self.assertEqual(record.platform, "ACME")
        self.assertEqual(record.source, "dalle")
        self.assertEqual(AudioWatermark.with_defaults(defaults, timestamp=9).source, "voice")

    def test_empty_platform_falls_back(self) -> None:
        self.assertEqual(ImageWatermark.with_defaults(platform="", timestamp=1).platform, "SYNTHETIC")

    def test_to_record(self) -> None:
        record = ImageWatermark(platform="P", source="s", timestamp=1, model="m")
        self.assertEqual(
            record.to_record(),
            {"platform": "P", "source": "s", "timestamp": 1, "user_id_hash": None, "model": "m"},
        )


if __name__ == "__main__":
    unittest.main()
