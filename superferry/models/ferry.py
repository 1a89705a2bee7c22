"""
Ferry model - a vessel with a high-ceiling and a low-ceiling lane
"""

import struct
from dataclasses import dataclass
from typing import ClassVar

from superferry.config.constants import FERRY_FORMAT, MAX_FERRY_NAME_LENGTH, MAX_LANE_CAPACITY
from superferry.models.fields import check_text, decode_text, encode_text


@dataclass(frozen=True)
class Ferry:
    """A vessel and its lane capacities in metres."""
    name: str
    high_capacity: int
    low_capacity: int

    STRUCT: ClassVar[struct.Struct] = struct.Struct(FERRY_FORMAT)

    def __post_init__(self):
        check_text(self.name, MAX_FERRY_NAME_LENGTH, "Ferry name")
        for label, value in (("High", self.high_capacity), ("Low", self.low_capacity)):
            if not isinstance(value, int) or not 0 <= value <= MAX_LANE_CAPACITY:
                raise ValueError(
                    f"{label} ceiling lane capacity must be an integer "
                    f"between 0 and {MAX_LANE_CAPACITY}: {value!r}"
                )
        if self.high_capacity == 0 and self.low_capacity == 0:
            raise ValueError("At least one of high or low lane capacity must be greater than 0")

    def pack(self) -> bytes:
        return self.STRUCT.pack(encode_text(self.name), self.high_capacity, self.low_capacity)

    @classmethod
    def unpack(cls, raw: bytes) -> "Ferry":
        name, high, low = cls.STRUCT.unpack(raw)
        return cls(decode_text(name), high, low)
