from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import id3, png
from .config import ScanSettings
from .formats import ContainerFormat
from .models import WatermarkRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanResult:
    path: Path
    container: ContainerFormat
    record: Optional[WatermarkRecord] = None
    reason: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.record is not None


def detect_bytes(data: bytes, container: ContainerFormat) -> tuple[Optional[WatermarkRecord], Optional[str]]:
    match container:
        case ContainerFormat.PNG:
            result = png.try_detect(data)
        case ContainerFormat.MP3:
            result = id3.try_detect(data)
        case _:
            return None, "unsupported container"
    return result.record, result.reason


class WatermarkScanner:
    """Walks the configured roots and checks every included file for a marker."""

    def __init__(self, settings: ScanSettings) -> None:
        self.settings = settings
        self._exts = {ext.lower() for ext in self.settings.include_extensions}

    def iter_files(self, roots: Optional[Iterable[Path]] = None) -> Iterator[Path]:
        for root in roots if roots is not None else self.settings.roots:
            if root.is_file():
                if self._should_include(root):
                    yield root
                continue
            if not root.exists():
                logger.warning("Scan root %s does not exist", root)
                continue
            for file_path in sorted(root.rglob("*")):
                if file_path.is_file() and self._should_include(file_path):
                    yield file_path

    def scan(self, roots: Optional[Iterable[Path]] = None) -> Iterator[ScanResult]:
        for path in self.iter_files(roots):
            yield self.scan_file(path)

    def scan_file(self, path: Path) -> ScanResult:
        container = ContainerFormat.from_suffix(path.suffix)
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            return ScanResult(path=path, container=container, reason=str(exc))
        record, reason = detect_bytes(data, container)
        return ScanResult(path=path, container=container, record=record, reason=reason)

    def _should_include(self, path: Path) -> bool:
        if path.suffix.lower() not in self._exts:
            return False
        rel = str(path)
        for pattern in self.settings.exclude_patterns:
            if fnmatch.fnmatch(rel, pattern):
                return False
        return True
