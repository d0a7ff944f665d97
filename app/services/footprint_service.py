# app/services/footprint_service.py
from dataclasses import dataclass

from app.core.constants import (
    BYTES_PER_MB,
    ENERGY_PER_GB_KWH,
    FALLBACK_PERCENTILE,
    GLOBAL_INTENSITY_KEY,
    GRID_INTENSITY,
    MB_PER_GB,
    MONTHS_PER_YEAR,
    PERCENTILE_BANDS,
    WATER_PER_MB_LITERS,
)


@dataclass(frozen=True)
class Footprint:
    co2_grams: float
    total_data_mb: float
    percentile: int
    annual_co2_kg: float
    water_liters: float


def bytes_to_mb(size: int) -> float:
    return size / BYTES_PER_MB


def grid_intensity(country: str) -> float:
    """Grams of CO2 per kWh for the country grid, or the global average."""
    return GRID_INTENSITY.get(country, GRID_INTENSITY[GLOBAL_INTENSITY_KEY])


def co2_per_visit(total_bytes: int, country: str) -> float:
    data_gb = bytes_to_mb(total_bytes) / MB_PER_GB
    return data_gb * ENERGY_PER_GB_KWH * grid_intensity(country)


def percentile_for(co2_grams: float) -> int:
    for upper_bound, percentile in PERCENTILE_BANDS:
        if co2_grams < upper_bound:
            return percentile
    return FALLBACK_PERCENTILE


def estimate_footprint(total_bytes: int, country: str, monthly_visits: int) -> Footprint:
    """
    Applies the fixed energy model to a page weight.

    Args:
        total_bytes: Weight of the page and its resources.
        country: ISO country code of the host, or "Inconnu".
        monthly_visits: Visits per month used for the annual projections.
    """
    total_data_mb = bytes_to_mb(total_bytes)
    co2_grams = co2_per_visit(total_bytes, country)
    visits_per_year = monthly_visits * MONTHS_PER_YEAR
    return Footprint(
        co2_grams=co2_grams,
        total_data_mb=total_data_mb,
        percentile=percentile_for(co2_grams),
        annual_co2_kg=(co2_grams / 1000) * visits_per_year,
        water_liters=total_data_mb * WATER_PER_MB_LITERS * visits_per_year,
    )
