"""
Calculation Constants for the fleet backend

Centralized location for sentinels and thresholds shared by the ledger,
the report aggregator and the dashboard analytics.
"""

# Report sentinels
TOTAL_ROW_KEY = "TOTAL"  # date key of the trailing summary row
EFFICIENCY_UNAVAILABLE = "unavailable"  # efficiency when no fuel was recorded
EFFICIENCY_DECIMALS = 2

# ISO-8601 date/time separator; the day key is everything before it
DATE_TIME_SEPARATOR = "T"

# Dashboard HH target buckets: (label, inclusive upper bound); None = open ended
HH_TARGET_BUCKETS = (
    ("0-500", 500),
    ("501-1000", 1000),
    ("1001-1500", 1500),
    ("1501+", None),
)

# Vehicle master JSON columns
VEHICLE_NO_COLUMN = "Vehicle Master"
VEHICLE_HEADER_VALUE = "Vehicle No"
CITY_COLUMN = "Column4"
ZONE_COLUMN = "Column5"
DRIVER_NAME_COLUMN = "Column10"
DRIVER_MOBILE_COLUMN = "Column11"
INSPECTOR_COLUMN = "Column12"
INSPECTOR_MOBILE_COLUMN = "Column13"
HH_TARGET_COLUMN = "Column14"
REFERENCE_MILEAGE_COLUMN = "Column15"
