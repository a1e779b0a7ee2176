"""Shared test fixtures for page-loader tests."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from page_loader.config import Settings


def _key(url: httpx.URL) -> str:
    return f"{url.scheme}://{url.host}{url.path or '/'}"


class FakeSite:
    """Serves canned responses through ``httpx.MockTransport``.

    Unknown URLs answer 404. Every requested URL is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Tuple[int, bytes, Dict[str, str]]] = {}
        self.errors: Dict[str, Callable[[httpx.Request], None]] = {}
        self.requests: List[str] = []

    def add(
        self,
        url: str,
        body: bytes | str = b"",
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[_key(httpx.URL(url))] = (status, body, headers or {})

    def fail(self, url: str, raiser: Callable[[httpx.Request], None]) -> None:
        self.errors[_key(httpx.URL(url))] = raiser

    def handler(self, request: httpx.Request) -> httpx.Response:
        key = _key(request.url)
        self.requests.append(key)
        if key in self.errors:
            self.errors[key](request)
        status, body, headers = self.routes.get(key, (404, b"Not Found", {}))
        return httpx.Response(status, content=body, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def settings() -> Settings:
    return Settings(timeout_total=5.0, page_max_attempts=1)


@pytest.fixture
def hexlet_page_html() -> str:
    """Courses page with one local image and one foreign script."""
    return """
    <html lang="ru">
    <head>
        <meta charset="utf-8">
        <title>Courses</title>
        <script src="https://js.stripe.com/v3/"></script>
    </head>
    <body>
        <img src="/assets/professions/nodejs.png" alt="Node.js">
    </body>
    </html>
    """


@pytest.fixture
def mixed_resources_html() -> str:
    """Page referencing every kind of resource, local and foreign."""
    return """
    <html>
    <head>
        <link rel="stylesheet" href="/assets/application.css">
        <link rel="icon" href="/favicon.ico">
        <link rel="stylesheet" href="https://cdn.example.org/lib.css">
        <script src="/packs/js/runtime.js"></script>
    </head>
    <body>
        <img src="/images/logo.PNG">
        <img src="//example.com/images/photo.jpg">
        <img src="https://other.com/banner.png">
        <a href="/about.html">About</a>
        <a href="/docs/guide.html?lang=en">Guide</a>
        <a href="/contacts">Contacts</a>
        <a href="https://other.com/page.html">Elsewhere</a>
    </body>
    </html>
    """
