"""
Lane-capacity allocator for sailings.

Each sailing has two independent lane pools, measured in metres of
remaining lane length:
  - High-ceiling lane ('H'): the only lane tall vehicles (> 2.0m) may use
  - Low-ceiling lane ('L'): preferred for regular-height vehicles

Allocation is greedy and is never recomputed: regular vehicles take the low
lane if it has room and fall back to the high lane otherwise. The lane that
was actually debited is returned so the caller can persist it on the
reservation, and the same lane must be handed back on release. Height alone
cannot tell which lane a regular vehicle ended up in.
"""

from __future__ import annotations

from dataclasses import replace

from superferry.config.constants import (
    CAPACITY_TOLERANCE,
    HIGH_LANE,
    LANES,
    LOW_LANE,
    MAX_VEHICLE_HEIGHT,
    MAX_VEHICLE_LENGTH,
    TALL_VEHICLE_HEIGHT,
)
from superferry.errors import (
    CapacityOverflow,
    InsufficientCapacity,
    InvalidDimensions,
    InvalidLaneHint,
    SailingNotFound,
)
from superferry.models import Sailing
from superferry.models.fields import to_float32
from superferry.storage.ledgers import FerryLedger, SailingLedger
from superferry.utils.logger import get_logger

logger = get_logger(__name__)


def _within(value: float, limit: float) -> bool:
    # A stored float32 may sit just above the limit it was typed in at
    if 0 < value <= limit:
        return True
    return 0 < value < 2 * limit and to_float32(value) <= to_float32(limit)


def validate_dimensions(height: float, length: float):
    """Raise InvalidDimensions unless height is in (0, 9.9] and length in (0, 99.9]."""
    if not _within(height, MAX_VEHICLE_HEIGHT) or not _within(length, MAX_VEHICLE_LENGTH):
        raise InvalidDimensions(height, length)


def choose_lane(sailing: Sailing, height: float, length: float) -> str | None:
    """
    Pick the lane a vehicle would use on ``sailing``, without mutating it.

    Returns 'H', 'L', or None when neither permitted lane has room.
    """
    length = to_float32(length)
    if height > TALL_VEHICLE_HEIGHT:
        return HIGH_LANE if sailing.high_remaining >= length else None
    if sailing.low_remaining >= length:
        return LOW_LANE
    if sailing.high_remaining >= length:
        return HIGH_LANE
    return None


class CapacityAllocator:
    """Deducts and restores lane capacity on stored sailings."""

    def __init__(self, sailings: SailingLedger, ferries: FerryLedger):
        self.sailings = sailings
        self.ferries = ferries

    def can_fit(self, sailing: Sailing, height: float, length: float) -> bool:
        return choose_lane(sailing, height, length) is not None

    def _locate(self, sailing_id: str) -> tuple[int, Sailing]:
        found = self.sailings.find_by_id(sailing_id)
        if found is None:
            raise SailingNotFound(sailing_id)
        return found

    def allocate(self, sailing_id: str, height: float, length: float) -> str:
        """
        Deduct ``length`` from the lane the vehicle should use.

        Returns:
            The lane debited, 'H' or 'L'.

        Raises:
            InvalidDimensions, SailingNotFound, InsufficientCapacity
        """
        validate_dimensions(height, length)
        index, sailing = self._locate(sailing_id)

        lane = choose_lane(sailing, height, length)
        if lane is None:
            raise InsufficientCapacity(
                sailing_id, height, length, sailing.high_remaining, sailing.low_remaining,
            )

        length = to_float32(length)
        if lane == HIGH_LANE:
            updated = replace(sailing, high_remaining=sailing.high_remaining - length)
        else:
            updated = replace(sailing, low_remaining=sailing.low_remaining - length)
        self.sailings.write_at(index, updated)

        logger.info(
            "Allocated %.1fm in lane %s on %s (HRL %.1f, LRL %.1f)",
            length, lane, sailing_id, updated.high_remaining, updated.low_remaining,
        )
        return lane

    def release(self, sailing_id: str, length: float, lane_hint: str) -> str:
        """
        Give ``length`` back to the lane named by ``lane_hint``.

        A lane never goes above its ferry's capacity; a release that would
        overshoot by more than float32 slack is refused.

        Raises:
            InvalidLaneHint, SailingNotFound, CapacityOverflow
        """
        if lane_hint not in LANES:
            raise InvalidLaneHint(lane_hint, sailing_id)
        index, sailing = self._locate(sailing_id)

        length = to_float32(length)
        if lane_hint == HIGH_LANE:
            remaining = sailing.high_remaining + length
        else:
            remaining = sailing.low_remaining + length
        remaining = self._within_capacity(sailing, lane_hint, remaining)

        if lane_hint == HIGH_LANE:
            updated = replace(sailing, high_remaining=remaining)
        else:
            updated = replace(sailing, low_remaining=remaining)
        self.sailings.write_at(index, updated)

        logger.info(
            "Released %.1fm in lane %s on %s (HRL %.1f, LRL %.1f)",
            length, lane_hint, sailing_id, updated.high_remaining, updated.low_remaining,
        )
        return lane_hint

    def _within_capacity(self, sailing: Sailing, lane: str, remaining: float) -> float:
        ferry = self.ferries.get(sailing.ferry_name)
        if ferry is None:
            logger.warning("Ferry %s of sailing %s not found; release not bounded",
                           sailing.ferry_name, sailing.sailing_id)
            return remaining
        capacity = ferry.high_capacity if lane == HIGH_LANE else ferry.low_capacity
        if remaining > capacity + CAPACITY_TOLERANCE:
            raise CapacityOverflow(sailing.sailing_id, lane, remaining, capacity)
        return min(remaining, float(capacity))
