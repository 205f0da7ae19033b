from __future__ import annotations

from typing import Optional

import httpx

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "enquiry-intake/0.1"


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build the AsyncClient used for outbound provider calls.

    One client per app instance: it is created in the lifespan, kept on
    app.state.http_client and closed by that same lifespan.
    """
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    )
