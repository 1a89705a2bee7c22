"""
Core constants for the SuperFerry reservation system.

Record layouts, field limits, lane rules, the fare table
and the location of the data files.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Data files - one flat binary file per entity, no header
# ---------------------------------------------------------------------------
DATA_DIR = Path(os.environ.get("SUPERFERRY_DATA_DIR", "data"))

FERRY_FILE = "ferries.dat"
SAILING_FILE = "sailings.dat"
VEHICLE_FILE = "vehicles.dat"
RESERVATION_FILE = "reservations.dat"

# ---------------------------------------------------------------------------
# Record layouts - native byte order and C alignment ("@")
#   ferry:       name[26] high:int32 low:int32                       -> 36 bytes
#   sailing:     date[10] ferry[26] high:f32 low:f32 onboard:int32   -> 48 bytes
#   vehicle:     plate[11] phone[15] height:f32 length:f32           -> 36 bytes
#   reservation: date[10] plate[11] onboard:bool lane:char           -> 23 bytes
# ---------------------------------------------------------------------------
FERRY_FORMAT = "@26sii"
SAILING_FORMAT = "@10s26sffi"
VEHICLE_FORMAT = "@11s15sff"
RESERVATION_FORMAT = "@10s11s?c"

# Character limits (buffer size minus the NUL terminator)
MAX_FERRY_NAME_LENGTH = 25
SAILING_ID_LENGTH = 9
MAX_PLATE_LENGTH = 10
MAX_PHONE_LENGTH = 14

# ---------------------------------------------------------------------------
# Ferry capacities (metres of lane, per lane type)
# ---------------------------------------------------------------------------
MAX_LANE_CAPACITY = 3600

# Float32 slack allowed when a release lands just above a lane's capacity
CAPACITY_TOLERANCE = 0.01

# ---------------------------------------------------------------------------
# Vehicle dimensions (metres)
# ---------------------------------------------------------------------------
MAX_VEHICLE_HEIGHT = 9.9
MAX_VEHICLE_LENGTH = 99.9

# Anything taller than this must ride in the high-ceiling lane
TALL_VEHICLE_HEIGHT = 2.0

# Regular vehicles: height <= 2.0 and length <= 7.0
REGULAR_VEHICLE_HEIGHT = 2.0
REGULAR_VEHICLE_LENGTH = 7.0

# ---------------------------------------------------------------------------
# Lanes
# ---------------------------------------------------------------------------
HIGH_LANE = "H"
LOW_LANE = "L"
LANES = (HIGH_LANE, LOW_LANE)

# ---------------------------------------------------------------------------
# Fares (dollars)
# ---------------------------------------------------------------------------
FARES = {
    "regular_flat": 14.0,     # regular vehicle, any size within limits
    "tall_per_metre": 3.0,    # height > 2.0, charged on length
    "long_per_metre": 2.0,    # length > 7.0 only, charged on length
}

# Sailing id: TTT-DD-HH
SAILING_DAY_RANGE = (1, 31)
SAILING_HOUR_RANGE = (1, 24)
