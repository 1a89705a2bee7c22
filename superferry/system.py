"""
FerrySystem - owns the four ledgers of one data directory and wires the
services on top of them.

    with FerrySystem(data_dir) as system:
        system.schedule.add_ferry("QUEEN OF SURREY", 200, 300)
        system.schedule.add_sailing("ABC-01-08", "QUEEN OF SURREY")
        system.lifecycle.create("ABC123", "ABC-01-08", "604-555-1234", 1.8, 5.0)
"""

from __future__ import annotations

from pathlib import Path

from superferry.config.constants import DATA_DIR
from superferry.services.capacity_allocator import CapacityAllocator
from superferry.services.deletion_guards import DeletionGuards
from superferry.services.reservation_lifecycle import ReservationLifecycle
from superferry.services.schedule import Schedule
from superferry.storage.ledgers import FerryLedger, ReservationLedger, SailingLedger, VehicleLedger
from superferry.utils.logger import get_logger

logger = get_logger(__name__)


class FerrySystem:
    """All stores and services for one data directory."""

    def __init__(self, data_dir: Path | str | None = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR

        self.ferries = FerryLedger(self.data_dir)
        self.sailings = SailingLedger(self.data_dir)
        self.vehicles = VehicleLedger(self.data_dir)
        self.reservations = ReservationLedger(self.data_dir)

        self.allocator = CapacityAllocator(self.sailings, self.ferries)
        self.lifecycle = ReservationLifecycle(
            self.reservations, self.vehicles, self.sailings, self.allocator,
        )
        self.guards = DeletionGuards(self.ferries, self.sailings, self.reservations)
        self.schedule = Schedule(self.ferries, self.sailings, self.reservations, self.allocator)

    @property
    def stores(self) -> tuple:
        return (self.ferries, self.sailings, self.vehicles, self.reservations)

    def start(self) -> "FerrySystem":
        """Open (creating if needed) every data file."""
        for store in self.stores:
            store.open()
        logger.info("Startup complete: data in %s", self.data_dir)
        return self

    def shutdown(self):
        for store in self.stores:
            store.close()
        logger.info("Shutdown complete")

    def reset(self):
        """Empty every data file."""
        for store in self.stores:
            store.reset()
        logger.warning("System reset: all records in %s removed", self.data_dir)

    def __enter__(self) -> "FerrySystem":
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
