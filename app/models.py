# app/models.py
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings
from app.core.constants import UNKNOWN


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    monthly_visits: int = Field(
        default_factory=lambda: settings.DEFAULT_MONTHLY_VISITS,
        alias="monthlyVisits",
        ge=0,
    )

    @field_validator("url")
    @classmethod
    def must_be_absolute(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError("URL invalide : une adresse absolue http(s) est attendue")
        return value


class Breakdown(BaseModel):
    """Page weight per resource category, in MB."""
    images: float = 0.0
    scripts: float = 0.0
    css: float = 0.0
    other: float = 0.0


class HostingInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: str = UNKNOWN
    country: str = UNKNOWN
    is_green: bool = Field(default=False, alias="isGreen")


class ThirdPartyInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weight_mb: float = Field(alias="weightMB")
    domains: List[str]


class AnalysisReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    co2_grams: float = Field(alias="co2Grams")
    total_data_mb: float = Field(alias="totalDataMB")
    breakdown: Breakdown
    hosting: HostingInfo
    recommendations: List[str]

    # Extended fields, omitted from the response when unset
    percentile: Optional[int] = None
    annual_co2_kg: Optional[float] = Field(default=None, alias="annualCo2Kg")
    water_liters: Optional[float] = Field(default=None, alias="waterLiters")
    third_party: Optional[ThirdPartyInfo] = Field(default=None, alias="thirdParty")


class ErrorResponse(BaseModel):
    message: str
    details: Optional[str] = None
