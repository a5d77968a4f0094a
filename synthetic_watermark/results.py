from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class EmbedResult:
    """Output of an embed attempt.

    ``data`` is always safe to hand back to the caller: the watermarked
    buffer when ``embedded`` is true, otherwise an unchanged copy of the input.
    """

    data: bytes
    embedded: bool
    reason: Optional[str] = None

    @classmethod
    def passthrough(cls, original: bytes, reason: str) -> "EmbedResult":
        return cls(data=bytes(original), embedded=False, reason=reason)


@dataclass(frozen=True, slots=True)
class DetectResult(Generic[R]):
    record: Optional[R]
    reason: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.record is not None

    @classmethod
    def not_found(cls, reason: str) -> "DetectResult[R]":
        return cls(record=None, reason=reason)
