"""
tlsframe.errors
Typed failures raised while decoding record frames.
"""
from __future__ import annotations


class TlsFrameError(ValueError):
    pass


class BoundsError(TlsFrameError):
    """Fewer bytes available than a parse step needs."""

    def __init__(self, message: str, offset: int, needed: int, available: int):
        super().__init__(f"{message} (offset={offset}, needed={needed}, available={available})")
        self.offset = offset
        self.needed = needed
        self.available = available


class UnrecognizedTagError(TlsFrameError):
    def __init__(self, tag: int, offset: int):
        super().__init__(f"unrecognized content type 0x{tag:02x} at offset {offset}")
        self.tag = tag
        self.offset = offset


class RecordBodyError(TlsFrameError):
    """Raised by a record body codec for a body it cannot decode."""
