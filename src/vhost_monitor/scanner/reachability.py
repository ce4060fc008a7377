"""Reachability Probe - one GET per site, status code and latency."""

from __future__ import annotations

import asyncio
import time

import httpx
import structlog

from vhost_monitor.config import MonitorConfig
from vhost_monitor.errors import ReachabilityError
from vhost_monitor.model.site import ReachabilityResult, build_url

logger = structlog.get_logger(__name__)

# Binding to the IPv4 wildcard makes httpx resolve and connect over IPv4 only
IPV4_LOCAL_ADDRESS = "0.0.0.0"


class ReachabilityProbe:
    """Checks whether a site answers HTTP(S) and how fast.

    The request goes to the site's own hostname, so TLS targets get the
    domain as SNI. Certificates are not verified; expiry is the
    certificate inspector's concern.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or MonitorConfig()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        transport = self._transport or httpx.AsyncHTTPTransport(
            verify=False,
            local_address=IPV4_LOCAL_ADDRESS,
        )
        return httpx.AsyncClient(
            transport=transport,
            verify=False,
            timeout=httpx.Timeout(self.config.probe_timeout),
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=False,
        )

    async def probe(self, domain: str, port: int, is_tls: bool) -> ReachabilityResult:
        """Issue a single GET and report status and time to first byte.

        Never raises; any failure is an unreachable result.
        """
        url = build_url(domain, port, is_tls)
        try:
            status_code, elapsed_ms = await asyncio.wait_for(
                self._request(url), timeout=self.config.probe_timeout
            )
        except asyncio.TimeoutError:
            logger.warning("site_unreachable", domain=domain, port=port, url=url, error="timeout")
            return ReachabilityResult(is_reachable=False)
        except ReachabilityError as e:
            logger.warning("site_unreachable", domain=domain, port=port, url=url, error=str(e))
            return ReachabilityResult(is_reachable=False)

        return ReachabilityResult(
            is_reachable=True,
            status_code=status_code,
            response_time_ms=elapsed_ms,
        )

    async def _request(self, url: str) -> tuple[int, int]:
        start = time.monotonic()
        try:
            async with self._client() as client:
                # Response headers received == first byte; the body is never read
                async with client.stream("GET", url) as response:
                    elapsed_ms = int((time.monotonic() - start) * 1000)
                    return response.status_code, elapsed_ms
        except httpx.TimeoutException as e:
            raise ReachabilityError(f"timed out after {self.config.probe_timeout}s") from e
        except httpx.HTTPError as e:
            raise ReachabilityError(f"{type(e).__name__}: {e}") from e
        except (httpx.InvalidURL, ValueError, OSError) as e:
            raise ReachabilityError(f"{type(e).__name__}: {e}") from e
