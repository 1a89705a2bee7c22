"""
Reservation model - a vehicle booked onto a sailing
"""

import struct
from dataclasses import dataclass
from typing import ClassVar

from superferry.config.constants import LANES, LOW_LANE, MAX_PLATE_LENGTH, RESERVATION_FORMAT
from superferry.models.fields import check_text, decode_text, encode_text
from superferry.models.sailing import is_valid_sailing_id


@dataclass(frozen=True)
class Reservation:
    """
    A booking of one plate on one sailing.

    lane_used records the lane that was actually debited when the booking
    was made ('H' or 'L'); releasing capacity uses it verbatim.
    """
    plate: str
    sailing_id: str
    is_onboard: bool = False
    lane_used: str = LOW_LANE

    STRUCT: ClassVar[struct.Struct] = struct.Struct(RESERVATION_FORMAT)

    def __post_init__(self):
        check_text(self.plate, MAX_PLATE_LENGTH, "License plate")
        if not is_valid_sailing_id(self.sailing_id):
            raise ValueError(f"Sailing id must match TTT-DD-HH: {self.sailing_id!r}")
        if self.lane_used not in LANES:
            raise ValueError(f"Lane must be one of {LANES}: {self.lane_used!r}")

    @property
    def key(self) -> tuple[str, str]:
        return (self.plate, self.sailing_id)

    def pack(self) -> bytes:
        return self.STRUCT.pack(
            encode_text(self.sailing_id),
            encode_text(self.plate),
            self.is_onboard,
            self.lane_used.encode("ascii"),
        )

    @classmethod
    def unpack(cls, raw: bytes) -> "Reservation":
        sailing_id, plate, is_onboard, lane = cls.STRUCT.unpack(raw)
        return cls(decode_text(plate), decode_text(sailing_id), is_onboard, lane.decode("ascii"))
