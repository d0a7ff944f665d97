# app/services/hosting_service.py
import asyncio
import logging
from typing import Tuple

import httpx

from app.core.config import settings
from app.core.constants import UNKNOWN
from app.models import HostingInfo
from app.services.fetch_service import browser_headers

logger = logging.getLogger(__name__)


def _text(value) -> str:
    # non-string or blank values count as missing
    if isinstance(value, str):
        return value.strip()
    return ""


async def lookup_location(client: httpx.AsyncClient, hostname: str) -> Tuple[str, str]:
    """
    Asks the IP geolocation service who hosts the page and where.

    Returns:
        A (provider, country code) pair, or ("Inconnu", "Inconnu") if the
        lookup fails for any reason.
    """
    url = settings.IP_LOOKUP_URL.format(host=hostname)
    try:
        response = await client.get(url, headers=browser_headers(), timeout=settings.REQUEST_TIMEOUT)
        response.raise_for_status()
        data = response.json()
        if data.get("status") != "success":
            logger.warning("IP lookup for %s unsuccessful: %s", hostname, data.get("message", data.get("status")))
            return UNKNOWN, UNKNOWN
        provider = _text(data.get("org")) or _text(data.get("isp")) or UNKNOWN
        country = _text(data.get("countryCode")) or UNKNOWN
        return provider, country
    except (httpx.HTTPError, ValueError, AttributeError) as e:
        logger.warning("IP lookup for %s failed: %r", hostname, e)
        return UNKNOWN, UNKNOWN


async def check_green(client: httpx.AsyncClient, hostname: str) -> bool:
    """Returns True if the host is listed by the green hosting registry, False otherwise or on failure."""
    url = settings.GREEN_CHECK_URL.format(host=hostname)
    try:
        response = await client.get(url, headers=browser_headers(), timeout=settings.REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json().get("green") is True
    except (httpx.HTTPError, ValueError, AttributeError) as e:
        logger.warning("Green hosting check for %s failed: %r", hostname, e)
        return False


async def get_hosting_info(client: httpx.AsyncClient, hostname: str) -> HostingInfo:
    """Runs both hosting lookups concurrently; never raises."""
    (provider, country), is_green = await asyncio.gather(
        lookup_location(client, hostname),
        check_green(client, hostname),
    )
    hosting = HostingInfo(provider=provider, country=country, is_green=is_green)
    logger.info("Hosting for %s: %s", hostname, hosting)
    return hosting
