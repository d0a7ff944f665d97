# app/core/constants.py
"""
Fixed footprint model parameters.

These are tunable heuristics, not measured quantities. Mappings are wrapped in
MappingProxyType so request handlers cannot mutate them.
"""
from types import MappingProxyType

BYTES_PER_MB = 1024 * 1024
MB_PER_GB = 1024

# Grams of CO2 per kWh, by ISO country code of the hosting server
GLOBAL_INTENSITY_KEY = "GLOBAL"
GRID_INTENSITY = MappingProxyType({
    "FR": 52,
    "DE": 401,
    "GB": 208,
    "US": 384,
    GLOBAL_INTENSITY_KEY: 475,
})

# kWh for the whole transfer chain (data center, network, device)
ENERGY_PER_GB_KWH = 1.8

# Liters of water per MB transferred (1.8 kWh/GB at roughly 1.8 L/kWh of cooling)
WATER_PER_MB_LITERS = 0.0032

MONTHS_PER_YEAR = 12

# (upper bound in grams, percentile) checked in order; FALLBACK_PERCENTILE otherwise
PERCENTILE_BANDS = (
    (0.5, 90),
    (1.0, 70),
    (2.0, 40),
)
FALLBACK_PERCENTILE = 20

# Recommendation thresholds, as a share of total bytes
IMAGE_SHARE_THRESHOLD = 0.6
SCRIPT_SHARE_THRESHOLD = 0.3
THIRD_PARTY_SHARE_THRESHOLD = 0.3

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "svg"})
SCRIPT_EXTENSIONS = frozenset({"js"})
STYLESHEET_EXTENSIONS = frozenset({"css"})

UNKNOWN = "Inconnu"
