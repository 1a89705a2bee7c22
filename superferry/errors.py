"""
Error kinds raised by the reservation core.

Every error carries the context a caller needs to decide whether to retry
with corrected input (sailing id, plate, reason). None of them is fatal.
"""

from __future__ import annotations

from superferry.config.constants import TALL_VEHICLE_HEIGHT


class ReservationError(Exception):
    """Base class for all reservation-core failures."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message, **self.context}


class InvalidDimensions(ReservationError, ValueError):
    def __init__(self, height: float, length: float):
        super().__init__(
            f"Invalid vehicle dimensions (height {height}, length {length}). "
            "Height must be in (0, 9.9], length in (0, 99.9]",
            height=height, length=length,
        )


class InvalidLaneHint(ReservationError, ValueError):
    def __init__(self, lane_hint, sailing_id: str):
        super().__init__(
            f"Invalid lane hint {lane_hint!r} when freeing capacity on {sailing_id} (need 'H' or 'L')",
            lane_hint=lane_hint, sailing_id=sailing_id,
        )


class SailingNotFound(ReservationError, LookupError):
    def __init__(self, sailing_id: str):
        super().__init__(f"Sailing not found: {sailing_id}", sailing_id=sailing_id)


class RecordNotFound(ReservationError, LookupError):
    """Unknown ferry, out-of-range index, or a selection that matches nothing."""


class InsufficientCapacity(ReservationError):
    def __init__(self, sailing_id: str, height: float, length: float,
                 high_remaining: float, low_remaining: float):
        lanes = "high lane" if height > TALL_VEHICLE_HEIGHT else "either lane"
        super().__init__(
            f"Not enough space in {lanes} for a {length:.1f}m vehicle on sailing {sailing_id} "
            f"(HRL {high_remaining:.1f}m, LRL {low_remaining:.1f}m)",
            sailing_id=sailing_id, height=height, length=length,
            high_remaining=high_remaining, low_remaining=low_remaining,
        )


class CapacityOverflow(ReservationError, ValueError):
    def __init__(self, sailing_id: str, lane: str, remaining: float, capacity: int):
        super().__init__(
            f"Releasing lane {lane} on {sailing_id} would leave {remaining:.1f}m, "
            f"more than the ferry's {capacity}m capacity",
            sailing_id=sailing_id, lane=lane, remaining=remaining, capacity=capacity,
        )


class DuplicateReservation(ReservationError):
    def __init__(self, plate: str, sailing_id: str):
        super().__init__(
            f"License plate {plate} already has a reservation for sailing {sailing_id}",
            plate=plate, sailing_id=sailing_id,
        )


class DuplicateRecord(ReservationError):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} already exists: {key}", kind=kind, key=key)


class VehicleConflict(ReservationError):
    def __init__(self, plate: str, field: str):
        super().__init__(
            f"Vehicle {field} mismatch for plate {plate}",
            plate=plate, field=field,
        )


class FerryInUse(ReservationError):
    def __init__(self, ferry_name: str, sailing_ids: list[str]):
        super().__init__(
            f"Ferry {ferry_name} cannot be deleted while assigned to sailing(s): "
            + ", ".join(sailing_ids),
            ferry_name=ferry_name, sailing_ids=list(sailing_ids),
        )
        self.sailing_ids = list(sailing_ids)


class StorageIOFailure(ReservationError, OSError):
    def __init__(self, path, operation: str, cause: BaseException | None = None):
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Storage {operation} failed on {path}{reason}",
            path=str(path), operation=operation,
        )
