"""
Sailing model - a ferry scheduled on a date, with its remaining lane lengths
"""

import struct
from dataclasses import dataclass
from typing import ClassVar

from superferry.config.constants import (
    MAX_FERRY_NAME_LENGTH,
    SAILING_DAY_RANGE,
    SAILING_FORMAT,
    SAILING_HOUR_RANGE,
    SAILING_ID_LENGTH,
)
from superferry.models.fields import check_text, decode_text, encode_text, to_float32


def is_valid_sailing_id(sailing_id: str) -> bool:
    """
    Check the TTT-DD-HH format: 3 uppercase letters, a day 01-31
    and an hour 01-24, separated by dashes.
    """
    if not isinstance(sailing_id, str) or len(sailing_id) != SAILING_ID_LENGTH:
        return False
    terminal, day, hour = sailing_id[:3], sailing_id[4:6], sailing_id[7:9]
    if sailing_id[3] != "-" or sailing_id[6] != "-":
        return False
    if not (terminal.isascii() and terminal.isalpha() and terminal.isupper()):
        return False
    if not (day.isascii() and day.isdigit() and hour.isascii() and hour.isdigit()):
        return False
    return (SAILING_DAY_RANGE[0] <= int(day) <= SAILING_DAY_RANGE[1]
            and SAILING_HOUR_RANGE[0] <= int(hour) <= SAILING_HOUR_RANGE[1])


@dataclass(frozen=True)
class Sailing:
    """
    A scheduled sailing.

    high_remaining / low_remaining start at the ferry's capacities and are
    only changed by the capacity allocator. onboard_count counts bookings.
    """
    sailing_id: str
    ferry_name: str
    high_remaining: float
    low_remaining: float
    onboard_count: int = 0

    STRUCT: ClassVar[struct.Struct] = struct.Struct(SAILING_FORMAT)

    def __post_init__(self):
        if not is_valid_sailing_id(self.sailing_id):
            raise ValueError(f"Sailing id must match TTT-DD-HH: {self.sailing_id!r}")
        check_text(self.ferry_name, MAX_FERRY_NAME_LENGTH, "Ferry name")
        # Keep the in-memory values identical to what lands on disk
        object.__setattr__(self, "high_remaining", to_float32(self.high_remaining))
        object.__setattr__(self, "low_remaining", to_float32(self.low_remaining))
        if self.high_remaining < 0 or self.low_remaining < 0:
            raise ValueError(f"Remaining lane length cannot be negative on {self.sailing_id}")
        if self.onboard_count < 0:
            raise ValueError(f"Onboard count cannot be negative on {self.sailing_id}")

    def pack(self) -> bytes:
        return self.STRUCT.pack(
            encode_text(self.sailing_id),
            encode_text(self.ferry_name),
            self.high_remaining,
            self.low_remaining,
            self.onboard_count,
        )

    @classmethod
    def unpack(cls, raw: bytes) -> "Sailing":
        sailing_id, ferry_name, high, low, onboard = cls.STRUCT.unpack(raw)
        return cls(decode_text(sailing_id), decode_text(ferry_name), high, low, onboard)
