from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .. import id3, png
from ..config import MarkerDefaults
from ..formats import ContainerFormat
from ..fs_utils import write_bytes_atomic
from ..results import EmbedResult
from .output import embedded, unchanged

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EmbedReport:
    ok: bool
    line: str
    out: Path


def _resolve_format(path: Path, fmt: Optional[str]) -> ContainerFormat:
    if not fmt:
        return ContainerFormat.from_suffix(path.suffix)
    image = ContainerFormat.for_image(fmt)
    if image is not ContainerFormat.UNSUPPORTED:
        return image
    return ContainerFormat.for_audio(fmt)


def run(
    path: Path,
    *,
    defaults: MarkerDefaults,
    out: Optional[Path] = None,
    fmt: Optional[str] = None,
    platform: Optional[str] = None,
    source: Optional[str] = None,
    model: Optional[str] = None,
    user_id_hash: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> EmbedReport:
    data = path.read_bytes()
    target = out or path
    fields = dict(
        defaults=defaults,
        platform=platform,
        source=source,
        timestamp=timestamp,
        user_id_hash=user_id_hash,
    )
    container = _resolve_format(path, fmt)
    match container:
        case ContainerFormat.PNG:
            result = png.try_embed(data, container.value, model=model, **fields)
        case ContainerFormat.MP3:
            if model:
                logger.warning("--model is ignored for MP3 files")
            result = id3.try_embed(data, container.value, **fields)
        case _:
            result = EmbedResult.passthrough(data, f"unsupported format for {path.name}")
    if not result.embedded:
        if out is not None:
            write_bytes_atomic(target, result.data)
        return EmbedReport(ok=False, line=unchanged(str(path), result.reason), out=target)
    write_bytes_atomic(target, result.data)
    logger.info("Wrote %s (%d bytes)", target, len(result.data))
    return EmbedReport(ok=True, line=embedded(str(path), f"-> {target}"), out=target)
