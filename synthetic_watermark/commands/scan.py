from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import ScanSettings
from ..scanner import WatermarkScanner
from .output import found, missing


@dataclass(slots=True)
class ScanReport:
    scanned: int = 0
    marked: int = 0
    lines: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return f"Scan complete: {self.marked} of {self.scanned} file(s) carry a synthetic-origin marker."


def run(settings: ScanSettings, roots: Optional[list[Path]] = None) -> ScanReport:
    report = ScanReport()
    scanner = WatermarkScanner(settings)
    for result in scanner.scan(roots or None):
        report.scanned += 1
        if result.found:
            report.marked += 1
            record = result.record
            report.lines.append(
                found(str(result.path), f"{result.container.value}, source={record.source}, platform={record.platform}")
            )
        else:
            report.lines.append(missing(str(result.path), result.reason))
    return report
