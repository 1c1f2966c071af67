"""Paginated access to the ENS registry subgraph."""

from collections.abc import Awaitable, Callable
from typing import Any, cast

import httpx
from prometheus_client import Counter

from ens_index.core.logging import get_logger
from ens_index.indexer.errors import RegistryError, RegistryRateLimited
from ens_index.indexer.retry import with_rate_limit_retry
from ens_index.models import RegistryRecord

logger = get_logger().bind(module="registry_pager")

REGISTRY_PAGES = Counter(
    "registry_pages_fetched_total", "Total number of registry pages fetched"
)

DOMAINS_QUERY = """
query getDomains($lastId: String!, $first: Int!) {
  domains(
    first: $first
    where: { name_gt: $lastId }
    orderBy: name
    orderDirection: asc
  ) {
    id
    name
    resolver {
      contentHash
    }
  }
}
"""


class RegistryPager:
    """Fetches successive pages of domain records ordered by name."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        page_size: int = 1000,
        retry_base_delay: float = 1.5,
        report_interval: int = 10,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        """Initialize registry pager.

        Args:
            client: HTTP client used for all registry requests
            url: GraphQL endpoint of the registry subgraph
            page_size: Records requested per page
            retry_base_delay: Linear backoff unit for rate-limit retries
            report_interval: Retries between streak warnings
            sleep: Awaitable sleep used between retries
        """
        self.client = client
        self.url = url
        self.page_size = page_size
        self._request_page = with_rate_limit_retry(
            base_delay=retry_base_delay,
            report_interval=report_interval,
            sleep=sleep,
        )(self._request)

    async def _request(self, cursor: str) -> list[dict[str, Any]]:
        payload = {
            "query": DOMAINS_QUERY,
            "variables": {"lastId": cursor, "first": self.page_size},
        }
        try:
            response = await self.client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise RegistryError(f"Registry request failed: {e!r}") from e

        if response.status_code == 429:
            raise RegistryRateLimited(f"Registry rate limited after {cursor!r}")
        if response.is_error:
            raise RegistryError(
                f"Registry returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RegistryError(f"Registry returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise RegistryError("Registry response is not a JSON object")
        if body.get("errors"):
            raise RegistryError(f"Registry query failed: {body['errors']}")

        data = body.get("data") or {}
        domains = data.get("domains")
        if not isinstance(domains, list):
            raise RegistryError("Registry response is missing data.domains")
        return cast(list[dict[str, Any]], domains)

    async def fetch_page(self, cursor: str = "") -> list[RegistryRecord]:
        """Fetch the page of records following ``cursor``.

        Rate-limit responses are retried without limit; every other failure
        propagates.

        Args:
            cursor: Name of the last record seen, empty to start from the beginning

        Returns:
            Records in ascending name order; empty once pagination is exhausted

        Raises:
            RegistryError: On any non rate-limit registry failure
        """
        domains = await self._request_page(cursor)
        REGISTRY_PAGES.inc()
        try:
            records = [RegistryRecord.from_api(item) for item in domains]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise RegistryError(f"Malformed registry record: {e}") from e
        logger.debug("Fetched registry page", cursor=cursor, records=len(records))
        return records
