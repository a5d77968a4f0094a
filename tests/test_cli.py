import io
import json
import struct
import tempfile
import unittest
import zlib
from contextlib import redirect_stdout
from pathlib import Path

from synthetic_watermark.cli import main
from synthetic_watermark.id3 import detect_audio_watermark
from synthetic_watermark.png import PNG_SIGNATURE, detect_image_watermark


def _chunk(chunk_type: bytes, body: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + chunk_type + body + struct.pack(">I", crc)


PNG = (
    PNG_SIGNATURE
    + _chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0))
    + _chunk(b"IDAT", zlib.compress(b"\x00\x00"))
    + _chunk(b"IEND", b"")
)


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.config = self.tmp / "synthetic-watermark.yaml"
        self.config.write_text("defaults:\n  platform: CLIAPP\n", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> str:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            main(["--config", str(self.config), *argv])
        return buffer.getvalue()

    def test_embed_in_place_then_detect_json(self) -> None:
        image = self.tmp / "render.png"
        image.write_bytes(PNG)
        output = self._run(
            "embed", str(image), "--source", "dalle", "--model", "dall-e-3", "--timestamp", "1234"
        )
        self.assertIn("EMBEDDED", output)
        record = detect_image_watermark(image.read_bytes())
        self.assertEqual(record.platform, "CLIAPP")
        self.assertEqual(record.model, "dall-e-3")

        payload = json.loads(self._run("detect", str(image), "--json"))
        self.assertEqual(
            payload,
            {
                "platform": "CLIAPP",
                "source": "dalle",
                "timestamp": 1234,
                "user_id_hash": None,
                "model": "dall-e-3",
            },
        )

    def test_embed_mp3_to_separate_output(self) -> None:
        audio = self.tmp / "speech.mp3"
        audio.write_bytes(b"\xff\xfb\x90\x64" + b"\x00" * 32)
        target = self.tmp / "out" / "speech.mp3"
        self._run("embed", str(audio), "--out", str(target), "--user-id-hash", "u42")
        self.assertFalse(audio.read_bytes().startswith(b"ID3"))
        record = detect_audio_watermark(target.read_bytes())
        self.assertEqual(record.source, "tts")
        self.assertEqual(record.user_id_hash, "u42")

    def test_embed_unsupported_file_exits_nonzero(self) -> None:
        picture = self.tmp / "photo.jpg"
        picture.write_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * 16)
        with self.assertRaises(SystemExit) as ctx:
            self._run("embed", str(picture))
        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(picture.read_bytes(), b"\xff\xd8\xff\xe0" + b"\x00" * 16)

    def test_detect_missing_marker_exits_nonzero(self) -> None:
        image = self.tmp / "plain.png"
        image.write_bytes(PNG)
        buffer = io.StringIO()
        with redirect_stdout(buffer), self.assertRaises(SystemExit) as ctx:
            main(["--config", str(self.config), "detect", str(image)])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("MISSING", buffer.getvalue())

    def test_detect_unreadable_file_reports_error(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer), self.assertRaises(SystemExit) as ctx:
            main(["--config", str(self.config), "detect", str(self.tmp / "absent.png")])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("absent.png: ERROR", buffer.getvalue())

    def test_scan(self) -> None:
        (self.tmp / "a.png").write_bytes(PNG)
        self._run("embed", str(self.tmp / "a.png"), "--timestamp", "1")
        (self.tmp / "b.png").write_bytes(PNG)
        output = self._run("scan", str(self.tmp))
        self.assertIn("a.png: FOUND", output)
        self.assertIn("b.png: MISSING", output)
        self.assertIn("1 of 2", output)


if __name__ == "__main__":
    unittest.main()
