from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class StatusLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def found(label: str, detail: Optional[str] = None) -> str:
    return StatusLine(label, "FOUND", detail).render()


def missing(label: str, detail: Optional[str] = None) -> str:
    return StatusLine(label, "MISSING", detail).render()


def embedded(label: str, detail: Optional[str] = None) -> str:
    return StatusLine(label, "EMBEDDED", detail).render()


def unchanged(label: str, detail: Optional[str] = None) -> str:
    return StatusLine(label, "UNCHANGED", detail).render()


def error(label: str, detail: Optional[str] = None) -> str:
    return StatusLine(label, "ERROR", detail).render()
