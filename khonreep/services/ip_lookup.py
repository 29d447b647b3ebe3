# khonreep/services/ip_lookup.py
from __future__ import annotations

import logging
from typing import Optional

import httpx

from khonreep.config import IPIFY_URL

log = logging.getLogger(__name__)

UNKNOWN_IP = "unknown"


class IPLookupClient:
    """
    Best-effort public IP lookup (ipify). Every failure is logged and
    reported as None; nothing escapes this class.
    """

    def __init__(
        self,
        url: str = IPIFY_URL,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def get_ip_address(self) -> Optional[str]:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(self.url, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("Failed to fetch IP address: %s", e)
            return None

        ip = data.get("ip") if isinstance(data, dict) else None
        if not isinstance(ip, str) or not ip:
            log.warning("Failed to fetch IP address: unexpected body %r", data)
            return None
        return ip
