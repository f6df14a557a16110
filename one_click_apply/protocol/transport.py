"""HTTP transport for the interview endpoint

Requests go through the browser context's request API so they carry the
logged-in session cookies. The endpoint returns 404 until the apply button
has been clicked for the job.
"""

import json
from dataclasses import dataclass
from typing import Any

from playwright.sync_api import Error as PlaywrightError

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "X-Requested-With": "fetch",
}


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: Any = None
    reason: str = ""

    @property
    def ok(self):
        return 200 <= self.status < 300


class TransportError(Exception):
    """Request never produced an HTTP response (DNS, reset, timeout...)"""


class PlaywrightTransport:
    def __init__(self, page, timeout_ms=30000):
        self.page = page
        self.timeout_ms = timeout_ms

    def _wrap(self, response):
        body = None
        if response.ok:
            try:
                body = response.json()
            except (PlaywrightError, ValueError) as e:
                raise TransportError(f"Invalid JSON from {response.url}: {e}") from e
        return HttpResponse(status=response.status, body=body, reason=response.status_text)

    def get(self, url):
        try:
            response = self.page.request.get(url, headers=DEFAULT_HEADERS, timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise TransportError(str(e)) from e
        return self._wrap(response)

    def post(self, url, payload):
        headers = dict(DEFAULT_HEADERS)
        headers["Content-Type"] = "application/json"
        try:
            response = self.page.request.post(
                url,
                headers=headers,
                data=json.dumps(payload),
                timeout=self.timeout_ms,
            )
        except PlaywrightError as e:
            raise TransportError(str(e)) from e
        return self._wrap(response)
