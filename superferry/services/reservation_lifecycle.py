"""
Reservation lifecycle: create, delete and check-in.

A reservation moves through
    allocated + persisted (not onboard) -> checked in (onboard) -> deleted

Lane capacity is debited before the reservation record is written. The two
writes are not atomic, so a failed reservation write is undone with a
compensating release of the lane that was just debited. That release is the
only recovery path in the core; every other failure happens before any
write.

Reservations whose sailing no longer exists ("orphans") are purged silently
whenever a delete or check-in touches their plate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from superferry.errors import DuplicateReservation, RecordNotFound, SailingNotFound, VehicleConflict
from superferry.models import Reservation, Vehicle
from superferry.services.capacity_allocator import CapacityAllocator, validate_dimensions
from superferry.services.fares import calculate_fare
from superferry.storage.ledgers import ReservationLedger, SailingLedger, VehicleLedger
from superferry.utils.logger import get_logger

logger = get_logger(__name__)

# Receives the candidate reservations, returns the chosen sailing id or None to cancel
Selector = Callable[[list[Reservation]], "str | None"]


@dataclass
class DeleteResult:
    """Outcome of deleting one reservation."""
    reservation: Reservation
    capacity_restored: bool   # False when the sailing or vehicle was already gone


@dataclass
class CheckInResult:
    """Outcome of checking one reservation in."""
    reservation: Reservation
    vehicle: Vehicle | None
    fare: float | None


class ReservationLifecycle:
    """Orchestrates reservations, vehicles and lane capacity."""

    def __init__(
        self,
        reservations: ReservationLedger,
        vehicles: VehicleLedger,
        sailings: SailingLedger,
        allocator: CapacityAllocator,
    ):
        self.reservations = reservations
        self.vehicles = vehicles
        self.sailings = sailings
        self.allocator = allocator

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        plate: str,
        sailing_id: str,
        phone: str,
        height: float,
        length: float,
    ) -> Reservation:
        """
        Book ``plate`` onto ``sailing_id``.

        The vehicle record is created on first use; a known plate must come
        back with the same phone and dimensions.

        Raises:
            DuplicateReservation, InvalidDimensions, VehicleConflict,
            SailingNotFound, InsufficientCapacity, StorageIOFailure
        """
        if self.reservations.exists(plate, sailing_id):
            raise DuplicateReservation(plate, sailing_id)

        validate_dimensions(height, length)
        vehicle = Vehicle(plate, phone, height, length)
        stored = self.vehicles.get(plate)
        if stored is not None:
            self._check_consistency(stored, vehicle)

        lane = self.allocator.allocate(sailing_id, vehicle.height, vehicle.length)

        try:
            if stored is None:
                self.vehicles.add(vehicle)
                logger.info("Vehicle record saved for %s", plate)
            reservation = Reservation(plate, sailing_id, is_onboard=False, lane_used=lane)
            self.reservations.add(reservation)
        except Exception:
            logger.error(
                "Failed to write reservation %s on %s; rolling back lane %s deduction",
                plate, sailing_id, lane,
            )
            # A vehicle saved above stays: the plate keeps its single (phone, size) record
            self.allocator.release(sailing_id, vehicle.length, lane)
            raise

        # Booking counts towards the onboard total; check-in does not add again
        self.sailings.adjust_onboard_count(sailing_id, +1)
        logger.info("Reservation confirmed: %s on %s (lane %s)", plate, sailing_id, lane)
        return reservation

    @staticmethod
    def _check_consistency(stored: Vehicle, incoming: Vehicle):
        if stored.phone != incoming.phone:
            raise VehicleConflict(incoming.plate, "phone number")
        if stored.height != incoming.height or stored.length != incoming.length:
            raise VehicleConflict(incoming.plate, "size")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_all_by_license(self, plate: str) -> list[Reservation]:
        return self.reservations.find_all_by_license(plate)

    def list_reservations(self) -> list[Reservation]:
        return self.reservations.records()

    def list_vehicles(self) -> list[Vehicle]:
        return self.vehicles.records()

    def _live_sailing_ids(self) -> set[str]:
        return {s.sailing_id for s in self.sailings.records()}

    # ------------------------------------------------------------------
    # Orphans
    # ------------------------------------------------------------------

    def purge_orphans(self, plate: str) -> list[Reservation]:
        """
        Delete every reservation of ``plate`` whose sailing is gone.

        Deletes run in descending index order: a swap-delete only moves the
        last record, so lower indices stay valid.
        """
        live = self._live_sailing_ids()
        orphans = [
            (index, r) for index, r in self.reservations.iter_records()
            if r.plate == plate and r.sailing_id not in live
        ]
        for index, reservation in sorted(orphans, key=lambda item: item[0], reverse=True):
            self.reservations.delete_at(index)
            logger.info("Purged orphan reservation %s on deleted sailing %s",
                        reservation.plate, reservation.sailing_id)
        return [r for _, r in orphans]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, plate: str, select: Selector) -> DeleteResult | None:
        """
        Delete one reservation of ``plate`` chosen by ``select``.

        Returns None when there is nothing to delete or the selection was
        cancelled. Capacity is restored with the reservation's own lane, and
        only if its sailing still exists at the time of the delete.
        """
        self.purge_orphans(plate)
        live = self._live_sailing_ids()
        candidates = [r for r in self.reservations.find_all_by_license(plate)
                      if r.sailing_id in live]
        if not candidates:
            logger.info("No valid reservations for %s", plate)
            return None

        chosen = select(candidates)
        if chosen is None:
            logger.info("Delete cancelled for %s", plate)
            return None
        target = self._pick(candidates, chosen, plate)

        vehicle = self.vehicles.get(plate)
        # Re-resolves the index by key; earlier indices may have shifted
        reservation = self.reservations.delete(plate, target.sailing_id)
        logger.info("Reservation deleted: %s on %s", plate, reservation.sailing_id)

        if not self.sailings.exists(reservation.sailing_id):
            logger.warning("Sailing %s was deleted meanwhile; counters and lanes not updated",
                           reservation.sailing_id)
            return DeleteResult(reservation, capacity_restored=False)

        self.sailings.adjust_onboard_count(reservation.sailing_id, -1)
        if vehicle is None:
            logger.warning("Vehicle info not found for %s; lane space not restored", plate)
            return DeleteResult(reservation, capacity_restored=False)

        self.allocator.release(reservation.sailing_id, vehicle.length, reservation.lane_used)
        return DeleteResult(reservation, capacity_restored=True)

    # ------------------------------------------------------------------
    # Check-in
    # ------------------------------------------------------------------

    def check_in(self, plate: str, select: Selector) -> CheckInResult | None:
        """
        Mark one pending reservation of ``plate`` as onboard.

        Raises:
            SailingNotFound if the chosen sailing disappeared after the
            candidate list was built.
        """
        self.purge_orphans(plate)
        live = self._live_sailing_ids()
        candidates = [r for r in self.reservations.find_all_by_license(plate)
                      if not r.is_onboard and r.sailing_id in live]
        if not candidates:
            logger.info("No pending reservations for %s", plate)
            return None

        chosen = select(candidates)
        if chosen is None:
            logger.info("Check-in cancelled for %s", plate)
            return None
        target = self._pick(candidates, chosen, plate)

        if not self.sailings.exists(target.sailing_id):
            raise SailingNotFound(target.sailing_id)

        updated = self.reservations.mark_onboard(plate, target.sailing_id)
        vehicle = self.vehicles.get(plate)
        if vehicle is None:
            logger.warning("Vehicle info not found for %s; fare unavailable", plate)
        fare = calculate_fare(vehicle) if vehicle is not None else None
        logger.info("Vehicle %s checked in on %s", plate, target.sailing_id)
        return CheckInResult(updated, vehicle, fare)

    @staticmethod
    def _pick(candidates: list[Reservation], sailing_id: str, plate: str) -> Reservation:
        for reservation in candidates:
            if reservation.sailing_id == sailing_id:
                return reservation
        raise RecordNotFound(
            f"No selectable reservation for {plate} on sailing {sailing_id}",
            plate=plate, sailing_id=sailing_id,
        )
