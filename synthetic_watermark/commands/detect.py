from __future__ import annotations

import json
import logging
from pathlib import Path

from .. import png
from ..formats import ContainerFormat
from ..scanner import detect_bytes
from .output import error, found, missing

logger = logging.getLogger(__name__)


def run(path: Path, *, json_output: bool = False) -> bool:
    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        print(error(str(path), exc.strerror or str(exc)))
        return False
    container = ContainerFormat.from_suffix(path.suffix)
    if container is ContainerFormat.UNSUPPORTED:
        container = ContainerFormat.PNG if png.is_png(data) else ContainerFormat.MP3
    record, reason = detect_bytes(data, container)
    if json_output:
        print(json.dumps(record.to_record() if record else None, ensure_ascii=False))
        return record is not None
    if record is None:
        print(missing(str(path), reason))
        return False
    details = ", ".join(
        f"{key}={value}" for key, value in record.to_record().items() if value is not None
    )
    print(found(str(path), details))
    return True
