"""
Vehicle classification and fares.

  - Regular (height <= 2.0m and length <= 7.0m): flat fare
  - Tall (height > 2.0m): charged per metre of length at the tall rate
  - Long only (length > 7.0m): charged per metre of length at the long rate
"""

from superferry.config.constants import FARES, TALL_VEHICLE_HEIGHT
from superferry.models import Vehicle


def vehicle_category(vehicle: Vehicle) -> str:
    """'Regular' or 'Special'."""
    return "Regular" if vehicle.is_regular else "Special"


def calculate_fare(vehicle: Vehicle) -> float:
    if vehicle.is_regular:
        return FARES["regular_flat"]
    if vehicle.height > TALL_VEHICLE_HEIGHT:
        return round(vehicle.length * FARES["tall_per_metre"], 2)
    return round(vehicle.length * FARES["long_per_metre"], 2)
