"""Async HTTP client used to deliver notification payloads."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from chatnotify.channels import ChannelPayload

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    status_code: int
    body: str


class HttpClient:
    """
    Issues one HTTP request per payload.

    Transport failures propagate as ``httpx.HTTPError``; callers that want
    a timeout configure it here.
    """

    def __init__(
        self,
        timeout: float = 10,
        follow_redirects: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.transport = transport

    async def request(self, payload: ChannelPayload) -> HttpResponse:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            transport=self.transport,
        ) as client:
            response = await client.request(
                method=payload.method,
                url=payload.url,
                headers=payload.headers,
                content=payload.body,
            )
        logger.debug("%s %s -> %s", payload.method, payload.url, response.status_code)
        return HttpResponse(status_code=response.status_code, body=response.text)
