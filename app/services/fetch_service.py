# app/services/fetch_service.py
import logging

import httpx

from app.core.config import settings
from app.core.exceptions import EmptyPageError, FetchError

logger = logging.getLogger(__name__)


def browser_headers() -> dict:
    # Some origins reject requests that do not look like a browser
    return {"User-Agent": settings.USER_AGENT}


async def fetch_document(client: httpx.AsyncClient, url: str) -> str:
    """
    Downloads the page to analyze.

    Args:
        client: The HTTP client used for every outbound call of the request.
        url: The absolute URL of the page.

    Returns:
        The decoded HTML text, guaranteed non-blank.

    Raises:
        FetchError: If the page is unreachable, times out, redirects too often
            or answers with a non-success status.
        EmptyPageError: If the page body is blank.
    """
    try:
        response = await client.get(
            url,
            headers=browser_headers(),
            timeout=settings.REQUEST_TIMEOUT,
            follow_redirects=True,
        )
        response.raise_for_status()
    except httpx.TooManyRedirects as e:
        logger.error("Too many redirects while fetching %s: %s", url, e)
        raise FetchError.too_many_redirects(url) from e
    except httpx.HTTPStatusError as e:
        logger.error("Fetching %s returned HTTP %s", url, e.response.status_code)
        raise FetchError.unreachable(url) from e
    except httpx.HTTPError as e:
        logger.error("Failed to fetch %s: %r", url, e)
        raise FetchError.unreachable(url) from e

    html = response.text
    if not isinstance(html, str) or not html.strip():
        logger.error("Page %s returned an empty body", url)
        raise EmptyPageError.for_url(url)

    logger.info("Fetched %s (%d characters)", url, len(html))
    return html
