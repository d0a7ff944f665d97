# app/services/resource_service.py
import asyncio
import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Set
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from app.core.config import settings
from app.core.constants import IMAGE_EXTENSIONS, SCRIPT_EXTENSIONS, STYLESHEET_EXTENSIONS
from app.services.fetch_service import browser_headers

logger = logging.getLogger(__name__)

FETCHABLE_SCHEMES = ("http", "https")


class Category(str, Enum):
    IMAGES = "images"
    SCRIPTS = "scripts"
    CSS = "css"
    OTHER = "other"


@dataclass
class PageWeight:
    """Byte totals for one analyzed page."""
    breakdown: Dict[Category, int] = field(default_factory=lambda: {c: 0 for c in Category})
    third_party_bytes: int = 0
    third_party_domains: Set[str] = field(default_factory=set)

    @property
    def total_bytes(self) -> int:
        return sum(self.breakdown.values())

    def add(self, category: "Category", size: int) -> None:
        self.breakdown[category] += size


def categorize(url: str) -> Category:
    """Infers the resource category from the extension of the URL path."""
    path = urlparse(url).path
    extension = posixpath.splitext(path)[1].lstrip(".").lower()
    if extension in IMAGE_EXTENSIONS:
        return Category.IMAGES
    if extension in SCRIPT_EXTENSIONS:
        return Category.SCRIPTS
    if extension in STYLESHEET_EXTENSIONS:
        return Category.CSS
    return Category.OTHER


def is_stylesheet_link(tag) -> bool:
    """True only for rel="stylesheet" exactly, not "alternate stylesheet" or "preload stylesheet"."""
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [value.lower() for value in rel] == ["stylesheet"]


def discover_resources(html: str, base_url: str) -> Set[str]:
    """
    Collects the absolute URLs of images, stylesheets and scripts referenced
    by the page. Relative references are resolved against base_url and the
    result is deduplicated.
    """
    soup = BeautifulSoup(html, "html.parser")
    references: List[str] = []
    references.extend(tag.get("src") for tag in soup.find_all("img", src=True))
    references.extend(tag.get("href") for tag in soup.find_all("link", href=True) if is_stylesheet_link(tag))
    references.extend(tag.get("src") for tag in soup.find_all("script", src=True))

    resources = set()
    for reference in references:
        reference = (reference or "").strip()
        if not reference:
            continue
        resolved = urljoin(base_url, reference)
        if urlparse(resolved).scheme not in FETCHABLE_SCHEMES:
            continue
        resources.add(resolved)
    logger.info("Discovered %d unique resources on %s", len(resources), base_url)
    return resources


async def probe_size(client: httpx.AsyncClient, url: str) -> int:
    """Returns the declared Content-Length of a resource, or 0 if it cannot be measured."""
    try:
        response = await client.head(
            url,
            headers=browser_headers(),
            timeout=settings.REQUEST_TIMEOUT,
            follow_redirects=True,
        )
        response.raise_for_status()
        return max(int(response.headers.get("content-length", 0)), 0)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Could not measure resource %s: %r", url, e)
        return 0


async def measure_resources(
    client: httpx.AsyncClient,
    resources: Iterable[str],
    page_url: str,
    html: str,
    track_third_party: bool = True,
) -> PageWeight:
    """
    Probes the resources concurrently, at most MAX_CONCURRENT_PROBES at a
    time, and aggregates the sizes by category and by origin. The document
    itself counts towards the "other" category.
    """
    urls = list(resources)
    semaphore = asyncio.Semaphore(max(settings.MAX_CONCURRENT_PROBES, 1))

    async def bounded_probe(url: str) -> int:
        async with semaphore:
            return await probe_size(client, url)

    sizes = await asyncio.gather(*(bounded_probe(u) for u in urls))

    weight = PageWeight()
    weight.add(Category.OTHER, len(html.encode("utf-8")))

    page_host = urlparse(page_url).hostname
    for url, size in zip(urls, sizes):
        weight.add(categorize(url), size)
        if not track_third_party:
            continue
        host = urlparse(url).hostname
        if host and host != page_host:
            weight.third_party_domains.add(host)
            weight.third_party_bytes += size

    logger.debug("Measured page weight for %s: %s", page_url, weight)
    return weight
