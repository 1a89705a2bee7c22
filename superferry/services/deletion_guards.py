"""
Referential integrity between ferries, sailings and reservations.

  - A ferry cannot be deleted while any sailing references it
  - Deleting a sailing first deletes every reservation on it, then the
    sailing itself; no capacity is restored because the sailing's lane
    accounting goes away with it
"""

from __future__ import annotations

from superferry.errors import FerryInUse, SailingNotFound
from superferry.models import Ferry
from superferry.storage.ledgers import FerryLedger, ReservationLedger, SailingLedger
from superferry.utils.logger import get_logger

logger = get_logger(__name__)


class DeletionGuards:
    def __init__(self, ferries: FerryLedger, sailings: SailingLedger,
                 reservations: ReservationLedger):
        self.ferries = ferries
        self.sailings = sailings
        self.reservations = reservations

    def delete_ferry(self, name: str) -> Ferry:
        """
        Delete a ferry that no sailing uses.

        Raises:
            FerryInUse listing the blocking sailing ids, or RecordNotFound.
        """
        blocking = self.sailings.find_sailings_with_ferry(name)
        if blocking:
            logger.warning("Ferry %s still assigned to %d sailing(s)", name, len(blocking))
            raise FerryInUse(name, blocking)
        ferry = self.ferries.delete_by_name(name)
        logger.info("Ferry deleted: %s", name)
        return ferry

    def _delete_reservations_for(self, sailing_id: str) -> int:
        # Repeat full passes until one finds nothing; swap-delete reorders records
        removed = 0
        while True:
            indexes = self.reservations.find_indexes_by_sailing(sailing_id)
            if not indexes:
                return removed
            for index in reversed(indexes):
                self.reservations.delete_at(index)
                removed += 1

    def delete_sailing(self, sailing_id: str) -> int:
        """
        Delete a sailing and, before it, all of its reservations.

        Returns the number of reservations removed.
        """
        if not self.sailings.exists(sailing_id):
            raise SailingNotFound(sailing_id)

        removed = self._delete_reservations_for(sailing_id)

        found = self.sailings.find_by_id(sailing_id)
        if found is None:
            raise SailingNotFound(sailing_id)
        self.sailings.delete_at(found[0])
        logger.info("Sailing deleted: %s (%d reservation(s) removed)", sailing_id, removed)
        return removed

    def delete_all_sailings(self) -> int:
        """Cascade-delete every sailing. Returns the number of sailings removed."""
        sailing_ids = [s.sailing_id for s in self.sailings.records()]
        for sailing_id in sailing_ids:
            self.delete_sailing(sailing_id)
        return len(sailing_ids)
