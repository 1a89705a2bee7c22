"""
Ferry and sailing scheduling.

Creates ferries and sailings, finds sailings with room for a vehicle and
builds the sailing report. Sailings start with their ferry's full lane
capacities; after that only the capacity allocator changes them.
"""

from __future__ import annotations

from dataclasses import dataclass

from superferry.errors import RecordNotFound
from superferry.models import Ferry, Sailing, is_valid_sailing_id
from superferry.services.capacity_allocator import CapacityAllocator
from superferry.storage.ledgers import FerryLedger, ReservationLedger, SailingLedger
from superferry.utils.logger import get_logger

logger = get_logger(__name__)


def parse_sailing_id(text: str) -> str:
    """
    Normalise a sailing id typed in any letter case.

    "abc-07-13" -> "ABC-07-13". Raises ValueError if not TTT-DD-HH
    (3 letters, day 01-31, hour 01-24).
    """
    candidate = text.strip()
    candidate = candidate[:3].upper() + candidate[3:]
    if not is_valid_sailing_id(candidate):
        raise ValueError(
            f"Invalid sailing id {text!r}: must be TTT-DD-HH "
            "(3 letters, day 01-31, hour 01-24)"
        )
    return candidate


@dataclass
class SailingReportRow:
    """One line of the sailing report."""
    sailing_id: str
    ferry_name: str
    high_remaining: float
    low_remaining: float
    booked: int        # onboard_count: bookings made
    checked_in: int    # reservations actually checked in

    def to_dict(self) -> dict:
        return {
            "sailing_id": self.sailing_id,
            "ferry": self.ferry_name,
            "high_remaining": round(self.high_remaining, 1),
            "low_remaining": round(self.low_remaining, 1),
            "booked": self.booked,
            "checked_in": self.checked_in,
        }


class Schedule:
    def __init__(
        self,
        ferries: FerryLedger,
        sailings: SailingLedger,
        reservations: ReservationLedger,
        allocator: CapacityAllocator,
    ):
        self.ferries = ferries
        self.sailings = sailings
        self.reservations = reservations
        self.allocator = allocator

    def add_ferry(self, name: str, high_capacity: int, low_capacity: int) -> Ferry:
        """Raises ValueError for bad values, DuplicateRecord for a taken name."""
        ferry = Ferry(name, high_capacity, low_capacity)
        self.ferries.add(ferry)
        logger.info("Ferry created: %s (HCLL %d m, LCLL %d m)", name, high_capacity, low_capacity)
        return ferry

    def add_sailing(self, sailing_id: str, ferry_name: str) -> Sailing:
        """
        Schedule ``ferry_name`` as sailing ``sailing_id``.

        Raises:
            ValueError for a malformed id, RecordNotFound for an unknown ferry,
            DuplicateRecord if the id is taken.
        """
        sailing_id = parse_sailing_id(sailing_id)
        ferry = self.ferries.get(ferry_name)
        if ferry is None:
            raise RecordNotFound(f"Ferry not found: {ferry_name}", ferry_name=ferry_name)

        sailing = Sailing(
            sailing_id=sailing_id,
            ferry_name=ferry.name,
            high_remaining=float(ferry.high_capacity),
            low_remaining=float(ferry.low_capacity),
        )
        self.sailings.add(sailing)
        logger.info("Sailing created: %s on ferry %s", sailing_id, ferry.name)
        return sailing

    def list_ferries(self) -> list[Ferry]:
        return self.ferries.records()

    def list_sailings(self) -> list[Sailing]:
        return self.sailings.records()

    def matching_sailings(self, height: float, length: float) -> list[Sailing]:
        """Sailings with room for a vehicle of this size, in file order."""
        return [s for s in self.sailings.records() if self.allocator.can_fit(s, height, length)]

    def checked_in_count(self, sailing_id: str) -> int:
        return sum(
            1 for r in self.reservations.records()
            if r.sailing_id == sailing_id and r.is_onboard
        )

    def sailing_report(self) -> list[SailingReportRow]:
        rows = []
        for sailing in self.sailings.records():
            rows.append(SailingReportRow(
                sailing_id=sailing.sailing_id,
                ferry_name=sailing.ferry_name,
                high_remaining=sailing.high_remaining,
                low_remaining=sailing.low_remaining,
                booked=sailing.onboard_count,
                checked_in=self.checked_in_count(sailing.sailing_id),
            ))
        return rows
