from __future__ import annotations


class WatermarkError(Exception):
    """Base class for failures inside the codecs; never escapes embed/detect."""


class MalformedContainerError(WatermarkError):
    """Signature mismatch, truncated buffer or missing structural anchor."""


class MarkerNotFoundError(WatermarkError):
    """Well-formed container without a synthetic-origin marker."""


class MarkerDecodeError(WatermarkError):
    """A marker was located but its payload could not be parsed."""


class MarkerEncodeError(WatermarkError):
    """A record field cannot be represented in the positional marker text."""
