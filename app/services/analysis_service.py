# app/services/analysis_service.py
import logging
from urllib.parse import urlparse

import httpx

from app.core.config import settings
from app.core.exceptions import InternalError
from app.models import AnalysisReport, AnalysisRequest, Breakdown, ThirdPartyInfo
from app.services import fetch_service, footprint_service, hosting_service, recommendation_service
from app.services.footprint_service import bytes_to_mb
from app.services.resource_service import discover_resources, measure_resources

logger = logging.getLogger(__name__)


async def analyze_page(client: httpx.AsyncClient, request: AnalysisRequest) -> AnalysisReport:
    """
    Runs the whole footprint pipeline for one page.

    Fetch failures and empty pages propagate as FetchError / EmptyPageError.
    Lookups and resource probes degrade to defaults on their own. Anything else
    that goes wrong after the page is fetched is reported as InternalError.
    """
    url = request.url
    logger.info("--- Starting analysis for %s ---", url)
    html = await fetch_service.fetch_document(client, url)

    try:
        report = await _build_report(client, request, html)
    except Exception as e:
        logger.exception("Unexpected failure while analyzing %s", url)
        raise InternalError(details=str(e)) from e

    logger.info("--- Analysis complete for %s: %.3f g CO2 ---", url, report.co2_grams)
    return report


async def _build_report(client: httpx.AsyncClient, request: AnalysisRequest, html: str) -> AnalysisReport:
    url = request.url
    hostname = urlparse(url).hostname

    resources = discover_resources(html, url)
    weight = await measure_resources(
        client, resources, url, html, track_third_party=settings.TRACK_THIRD_PARTY
    )
    hosting = await hosting_service.get_hosting_info(client, hostname)

    footprint = footprint_service.estimate_footprint(
        weight.total_bytes, hosting.country, request.monthly_visits
    )
    recommendations = recommendation_service.build_recommendations(
        weight, hosting, track_third_party=settings.TRACK_THIRD_PARTY
    )

    report = AnalysisReport(
        co2_grams=footprint.co2_grams,
        total_data_mb=footprint.total_data_mb,
        breakdown=Breakdown(**{c.value: bytes_to_mb(size) for c, size in weight.breakdown.items()}),
        hosting=hosting,
        recommendations=recommendations,
    )

    if settings.INCLUDE_EXTENDED_METRICS:
        report.percentile = footprint.percentile
        report.annual_co2_kg = footprint.annual_co2_kg
        report.water_liters = footprint.water_liters
        if settings.TRACK_THIRD_PARTY:
            report.third_party = ThirdPartyInfo(
                weight_mb=bytes_to_mb(weight.third_party_bytes),
                domains=sorted(weight.third_party_domains),
            )
    return report
