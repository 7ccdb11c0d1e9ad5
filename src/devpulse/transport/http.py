"""
HTTP fetch capability: one POST per event over httpx.
"""

from typing import Optional

import httpx

from devpulse import __version__
from devpulse.errors import DeliveryError


class HttpxFetch:
    """POST a body and raise DeliveryError on HTTP >= 400.

    A fresh AsyncClient per call: nothing (cookies, connections) is shared
    between events, and trust_env=False keeps netrc/proxy credentials off
    the request. The endpoint authenticates through the key in its URL.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def __call__(self, url: str, *, content: bytes, headers: dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(
            transport=self._transport,
            trust_env=False,
            follow_redirects=False,
            headers={"User-Agent": f"devpulse-python/{__version__}"},
            timeout=None,  # the sender's deadline governs
        ) as client:
            resp = await client.post(url, content=content, headers=headers)
        if resp.status_code >= 400:
            raise DeliveryError(f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code)
        return resp
