import asyncio

import httpx

from app.core.config import settings
from app.services.resource_service import Category, categorize, discover_resources, measure_resources, probe_size

PAGE_URL = "https://example.com/"


def test_categorize_by_extension():
    assert categorize("https://cdn.example.com/a/photo.JPG") == Category.IMAGES
    assert categorize("https://example.com/logo.svg?v=3") == Category.IMAGES
    assert categorize("https://example.com/app.js") == Category.SCRIPTS
    assert categorize("https://example.com/site.css#x") == Category.CSS
    assert categorize("https://example.com/font.woff2") == Category.OTHER
    assert categorize("https://example.com/") == Category.OTHER


def test_discover_resolves_and_deduplicates():
    html = """
    <html><head>
      <link rel="stylesheet" href="/style.css">
      <link rel="icon" href="/favicon.ico">
      <script src="js/app.js"></script>
      <script>console.log("inline")</script>
    </head><body>
      <img src="/img/a.png"><img src="https://example.com/img/a.png">
      <img src="data:image/png;base64,AAAA"><img src="">
    </body></html>
    """
    resources = discover_resources(html, "https://example.com/blog/post")
    assert resources == {
        "https://example.com/style.css",
        "https://example.com/blog/js/app.js",
        "https://example.com/img/a.png",
    }


def test_probe_size_is_zero_when_unmeasurable(web):
    web.sizes["https://example.com/nolength.png"] = "not-a-number"
    web.failures["https://example.com/slow.png"] = httpx.ReadTimeout

    async def run():
        async with web.client() as client:
            return [
                await probe_size(client, "https://example.com/missing.png"),
                await probe_size(client, "https://example.com/nolength.png"),
                await probe_size(client, "https://example.com/slow.png"),
            ]

    assert asyncio.run(run()) == [0, 0, 0]


def test_measure_counts_document_and_third_parties(web):
    html = "<html><body>hé</body></html>"
    web.sizes.update({
        "https://example.com/a.png": 1000,
        "https://cdn.other.net/lib.js": 500,
        "https://cdn.other.net/broken.css": 0,
    })

    async def run():
        async with web.client() as client:
            return await measure_resources(client, set(web.sizes), PAGE_URL, html)

    weight = asyncio.run(run())
    document_bytes = len(html.encode("utf-8"))
    assert weight.breakdown[Category.OTHER] == document_bytes
    assert weight.breakdown[Category.IMAGES] == 1000
    assert weight.breakdown[Category.SCRIPTS] == 500
    assert weight.total_bytes == document_bytes + 1500
    assert weight.third_party_domains == {"cdn.other.net"}
    assert weight.third_party_bytes == 500


def test_measure_without_third_party_tracking(web):
    web.sizes["https://cdn.other.net/lib.js"] = 500

    async def run():
        async with web.client() as client:
            return await measure_resources(client, set(web.sizes), PAGE_URL, "<p>x</p>", track_third_party=False)

    weight = asyncio.run(run())
    assert weight.third_party_bytes == 0
    assert not weight.third_party_domains


def test_only_plain_stylesheet_links_are_collected():
    html = """
    <link rel="stylesheet" href="/main.css">
    <link rel="Stylesheet" href="/upper.css">
    <link rel="alternate stylesheet" href="/alt.css">
    <link rel="preload stylesheet" href="/preload.css">
    <link rel="stylesheet">
    """
    assert discover_resources(html, PAGE_URL) == {
        "https://example.com/main.css",
        "https://example.com/upper.css",
    }


def test_measure_limits_concurrent_probes(monkeypatch):
    monkeypatch.setattr(settings, "MAX_CONCURRENT_PROBES", 2)
    in_flight = 0
    peak = 0

    async def slow_head(request):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return httpx.Response(200, headers={"content-length": "10"})

    urls = {f"https://example.com/{i}.png" for i in range(6)}

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(slow_head)) as client:
            return await measure_resources(client, urls, PAGE_URL, "<p>x</p>")

    weight = asyncio.run(run())
    assert peak == 2
    assert weight.breakdown[Category.IMAGES] == 60
