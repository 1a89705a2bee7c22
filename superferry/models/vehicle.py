"""
Vehicle model - a customer vehicle, keyed by licence plate
"""

import struct
from dataclasses import dataclass
from typing import ClassVar

from superferry.config.constants import (
    MAX_PHONE_LENGTH,
    MAX_PLATE_LENGTH,
    REGULAR_VEHICLE_HEIGHT,
    REGULAR_VEHICLE_LENGTH,
    VEHICLE_FORMAT,
)
from superferry.models.fields import check_text, decode_text, encode_text, to_float32


@dataclass(frozen=True)
class Vehicle:
    """One plate maps to exactly one (phone, height, length) triple."""
    plate: str
    phone: str
    height: float   # metres
    length: float   # metres

    STRUCT: ClassVar[struct.Struct] = struct.Struct(VEHICLE_FORMAT)

    def __post_init__(self):
        check_text(self.plate, MAX_PLATE_LENGTH, "License plate")
        check_text(self.phone, MAX_PHONE_LENGTH, "Phone number")
        object.__setattr__(self, "height", to_float32(self.height))
        object.__setattr__(self, "length", to_float32(self.length))

    @property
    def is_regular(self) -> bool:
        return self.height <= REGULAR_VEHICLE_HEIGHT and self.length <= REGULAR_VEHICLE_LENGTH

    def pack(self) -> bytes:
        return self.STRUCT.pack(
            encode_text(self.plate), encode_text(self.phone), self.height, self.length,
        )

    @classmethod
    def unpack(cls, raw: bytes) -> "Vehicle":
        plate, phone, height, length = cls.STRUCT.unpack(raw)
        return cls(decode_text(plate), decode_text(phone), height, length)
