"""
Field helpers shared by the fixed-size record models.

Strings live on disk as NUL-padded byte buffers; floats as float32.
"""

import struct

_FLOAT32 = struct.Struct("@f")


def check_text(value: str, max_length: int, field: str) -> str:
    """Validate a string that has to fit a fixed buffer (plus its NUL)."""
    if not isinstance(value, str):
        raise TypeError(f"{field} must be a string, got {type(value).__name__}")
    encoded = value.encode("utf-8")
    if not encoded or len(encoded) > max_length or b"\0" in encoded:
        raise ValueError(f"{field} must be 1-{max_length} characters: {value!r}")
    return value


def encode_text(value: str) -> bytes:
    # struct pads "Ns" fields with NULs
    return value.encode("utf-8")


def decode_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def to_float32(value: float) -> float:
    """Round a Python float to the nearest float32, the precision stored on disk."""
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
