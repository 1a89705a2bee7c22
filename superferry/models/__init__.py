"""
Models package - fixed-size record types (Ferry, Sailing, Vehicle, Reservation)
"""

from .ferry import Ferry
from .reservation import Reservation
from .sailing import Sailing, is_valid_sailing_id
from .vehicle import Vehicle

__all__ = ["Ferry", "Reservation", "Sailing", "Vehicle", "is_valid_sailing_id"]
