"""
Entity ledgers: one RecordStore per record type, plus key lookups.

Every lookup is a linear scan of the file. Lookups return fresh indices;
none of them should be held across a delete on the same ledger.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from superferry.config.constants import FERRY_FILE, RESERVATION_FILE, SAILING_FILE, VEHICLE_FILE
from superferry.errors import (
    DuplicateRecord,
    DuplicateReservation,
    RecordNotFound,
    SailingNotFound,
)
from superferry.models import Ferry, Reservation, Sailing, Vehicle
from superferry.storage.record_store import RecordStore
from superferry.utils.logger import get_logger

logger = get_logger(__name__)


class FerryLedger(RecordStore[Ferry]):
    """Ferries keyed by name."""

    def __init__(self, data_dir: Path | str):
        super().__init__(Path(data_dir) / FERRY_FILE, Ferry)

    def find_by_name(self, name: str) -> tuple[int, Ferry] | None:
        return self.find_first(lambda f: f.name == name)

    def get(self, name: str) -> Ferry | None:
        found = self.find_by_name(name)
        return found[1] if found else None

    def exists(self, name: str) -> bool:
        return self.find_by_name(name) is not None

    def add(self, ferry: Ferry) -> int:
        if self.exists(ferry.name):
            raise DuplicateRecord("Ferry", ferry.name)
        return self.append(ferry)

    def delete_by_name(self, name: str) -> Ferry:
        found = self.find_by_name(name)
        if found is None:
            raise RecordNotFound(f"Ferry not found: {name}", ferry_name=name)
        index, ferry = found
        self.delete_at(index)
        return ferry


class SailingLedger(RecordStore[Sailing]):
    """Sailings keyed by sailing id (TTT-DD-HH)."""

    def __init__(self, data_dir: Path | str):
        super().__init__(Path(data_dir) / SAILING_FILE, Sailing)

    def find_by_id(self, sailing_id: str) -> tuple[int, Sailing] | None:
        return self.find_first(lambda s: s.sailing_id == sailing_id)

    def get(self, sailing_id: str) -> Sailing:
        found = self.find_by_id(sailing_id)
        if found is None:
            raise SailingNotFound(sailing_id)
        return found[1]

    def exists(self, sailing_id: str) -> bool:
        return self.find_by_id(sailing_id) is not None

    def add(self, sailing: Sailing) -> int:
        if self.exists(sailing.sailing_id):
            raise DuplicateRecord("Sailing", sailing.sailing_id)
        return self.append(sailing)

    def update(self, sailing: Sailing):
        """Rewrite the stored sailing with the same id."""
        found = self.find_by_id(sailing.sailing_id)
        if found is None:
            raise SailingNotFound(sailing.sailing_id)
        self.write_at(found[0], sailing)

    def find_sailings_with_ferry(self, ferry_name: str) -> list[str]:
        return [s.sailing_id for _, s in self.iter_records() if s.ferry_name == ferry_name]

    def adjust_onboard_count(self, sailing_id: str, delta: int) -> Sailing:
        """Add ``delta`` to the sailing's onboard count, never going below zero."""
        found = self.find_by_id(sailing_id)
        if found is None:
            raise SailingNotFound(sailing_id)
        index, sailing = found
        updated = replace(sailing, onboard_count=max(sailing.onboard_count + delta, 0))
        self.write_at(index, updated)
        return updated


class VehicleLedger(RecordStore[Vehicle]):
    """Vehicles keyed by licence plate."""

    def __init__(self, data_dir: Path | str):
        super().__init__(Path(data_dir) / VEHICLE_FILE, Vehicle)

    def find_by_plate(self, plate: str) -> tuple[int, Vehicle] | None:
        return self.find_first(lambda v: v.plate == plate)

    def get(self, plate: str) -> Vehicle | None:
        found = self.find_by_plate(plate)
        return found[1] if found else None

    def add(self, vehicle: Vehicle) -> int:
        if self.find_by_plate(vehicle.plate) is not None:
            raise DuplicateRecord("Vehicle", vehicle.plate)
        return self.append(vehicle)


class ReservationLedger(RecordStore[Reservation]):
    """Reservations keyed by (plate, sailing id)."""

    def __init__(self, data_dir: Path | str):
        super().__init__(Path(data_dir) / RESERVATION_FILE, Reservation)

    def find_index(self, plate: str, sailing_id: str) -> int | None:
        found = self.find_first(lambda r: r.plate == plate and r.sailing_id == sailing_id)
        return found[0] if found else None

    def exists(self, plate: str, sailing_id: str) -> bool:
        return self.find_index(plate, sailing_id) is not None

    def find_all_indexes_by_license(self, plate: str) -> list[int]:
        return self.find_indexes(lambda r: r.plate == plate)

    def find_all_by_license(self, plate: str) -> list[Reservation]:
        return [r for _, r in self.iter_records() if r.plate == plate]

    def find_indexes_by_sailing(self, sailing_id: str) -> list[int]:
        return self.find_indexes(lambda r: r.sailing_id == sailing_id)

    def add(self, reservation: Reservation) -> int:
        if self.exists(reservation.plate, reservation.sailing_id):
            raise DuplicateReservation(reservation.plate, reservation.sailing_id)
        return self.append(reservation)

    def _require_index(self, plate: str, sailing_id: str) -> int:
        index = self.find_index(plate, sailing_id)
        if index is None:
            raise RecordNotFound(
                f"No reservation for {plate} on sailing {sailing_id}",
                plate=plate, sailing_id=sailing_id,
            )
        return index

    def mark_onboard(self, plate: str, sailing_id: str) -> Reservation:
        index = self._require_index(plate, sailing_id)
        updated = replace(self.read_at(index), is_onboard=True)
        self.write_at(index, updated)
        return updated

    def delete(self, plate: str, sailing_id: str) -> Reservation:
        index = self._require_index(plate, sailing_id)
        reservation = self.read_at(index)
        self.delete_at(index)
        return reservation
