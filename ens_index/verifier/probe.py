"""Sequential reachability probes against IPFS gateways."""

import asyncio
from typing import NamedTuple

import httpx
from prometheus_client import Counter

from ens_index.core.logging import get_logger

logger = get_logger().bind(module="gateway_probe")

GATEWAY_PROBES = Counter(
    "gateway_probes_total", "Total number of gateway probes", ["gateway", "outcome"]
)


class GatewayResult(NamedTuple):
    """Outcome of one gateway request; ``http_status`` is None on timeout or error."""

    gateway: str
    http_status: int | None
    succeeded: bool


class GatewayProbe:
    """Requests a locator from every configured gateway, one after another."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        gateways: list[str],
        timeout: float = 15.0,
    ) -> None:
        """Initialize gateway probe.

        Args:
            client: HTTP client used for gateway requests
            gateways: Gateway base URLs in probe order
            timeout: Hard limit in seconds for each gateway request
        """
        self.client = client
        self.gateways = list(gateways)
        self.timeout = timeout

    async def _fetch_status(self, url: str) -> int:
        # The body is never read; only the status line matters.
        async with self.client.stream("GET", url, follow_redirects=True) as response:
            return response.status_code

    async def probe_gateway(self, gateway: str, value: str) -> GatewayResult:
        """Probe a single gateway exactly once.

        Args:
            gateway: Gateway base URL
            value: Content locator appended to the base URL

        Returns:
            GatewayResult; timeouts and transport errors carry a None status
        """
        url = f"{gateway}{value}"
        try:
            status = await asyncio.wait_for(self._fetch_status(url), self.timeout)
        except asyncio.TimeoutError:
            logger.debug("Gateway timed out", url=url, timeout=self.timeout)
            GATEWAY_PROBES.labels(gateway=gateway, outcome="timeout").inc()
            return GatewayResult(gateway=gateway, http_status=None, succeeded=False)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Gateway request failed", url=url, error=repr(e))
            GATEWAY_PROBES.labels(gateway=gateway, outcome="error").inc()
            return GatewayResult(gateway=gateway, http_status=None, succeeded=False)

        GATEWAY_PROBES.labels(gateway=gateway, outcome=str(status)).inc()
        return GatewayResult(gateway=gateway, http_status=status, succeeded=status == 200)

    async def probe(self, value: str) -> list[GatewayResult]:
        """Probe every gateway in configured order.

        Args:
            value: Content locator (a CID)

        Returns:
            One result per gateway, in configured order
        """
        results: list[GatewayResult] = []
        for gateway in self.gateways:
            results.append(await self.probe_gateway(gateway, value))
        return results
