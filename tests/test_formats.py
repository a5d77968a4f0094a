import unittest

from synthetic_watermark.formats import ContainerFormat


class TestContainerFormat(unittest.TestCase):
    def test_image_formats(self) -> None:
        self.assertIs(ContainerFormat.for_image("png"), ContainerFormat.PNG)
        self.assertIs(ContainerFormat.for_image("PNG"), ContainerFormat.PNG)
        self.assertIs(ContainerFormat.for_image("image/png"), ContainerFormat.PNG)
        self.assertIs(ContainerFormat.for_image("image/jpeg"), ContainerFormat.UNSUPPORTED)
        self.assertIs(ContainerFormat.for_image("image/image/png"), ContainerFormat.UNSUPPORTED)
        self.assertIs(ContainerFormat.for_image("mp3"), ContainerFormat.UNSUPPORTED)

    def test_audio_formats(self) -> None:
        self.assertIs(ContainerFormat.for_audio("mp3"), ContainerFormat.MP3)
        self.assertIs(ContainerFormat.for_audio("MP3"), ContainerFormat.MP3)
        self.assertIs(ContainerFormat.for_audio("wav"), ContainerFormat.UNSUPPORTED)
        self.assertIs(ContainerFormat.for_audio(""), ContainerFormat.UNSUPPORTED)

    def test_from_suffix(self) -> None:
        self.assertIs(ContainerFormat.from_suffix(".PNG"), ContainerFormat.PNG)
        self.assertIs(ContainerFormat.from_suffix(".mp3"), ContainerFormat.MP3)
        self.assertIs(ContainerFormat.from_suffix(".flac"), ContainerFormat.UNSUPPORTED)


if __name__ == "__main__":
    unittest.main()
