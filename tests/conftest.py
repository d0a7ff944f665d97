import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app, get_http_client

PAGE_URL = "https://example.com/"
IP_LOOKUP_HOST = "ip-api.com"
GREEN_CHECK_HOST = "api.thegreenwebfoundation.org"


class FakeWeb:
    """
    Routes outbound requests of a test to canned responses.

    Pages are served for GET, resource sizes for HEAD, and both lookup
    services answer according to the `location` and `green` attributes.
    """

    def __init__(self):
        self.pages = {}
        self.sizes = {}
        self.failures = {}
        self.location = {"status": "success", "org": "OVH SAS", "countryCode": "FR"}
        self.green = True
        self.lookups_fail = False
        # raw responses that replace the canned lookup payloads when set
        self.ip_response = None
        self.green_response = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url in self.failures:
            raise self.failures[url](f"simulated failure for {url}", request=request)

        host = request.url.host
        if host in (IP_LOOKUP_HOST, GREEN_CHECK_HOST):
            if self.lookups_fail:
                raise httpx.ConnectError("lookup service down", request=request)
            if host == IP_LOOKUP_HOST:
                if self.ip_response is not None:
                    return self.ip_response
                return httpx.Response(200, json=self.location)
            if self.green_response is not None:
                return self.green_response
            return httpx.Response(200, json={"url": request.url.path.rsplit("/", 1)[-1], "green": self.green})

        if request.method == "HEAD":
            if url not in self.sizes:
                return httpx.Response(404)
            return httpx.Response(200, headers={"content-length": str(self.sizes[url])})

        if url in self.pages:
            return httpx.Response(200, text=self.pages[url], headers={"content-type": "text/html; charset=utf-8"})
        return httpx.Response(404)

    def probed(self):
        return [str(r.url) for r in self.requests if r.method == "HEAD"]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def web():
    return FakeWeb()


@pytest.fixture
def api(web):
    async def override_client():
        async with web.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = override_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
