"""Resumable crawl of the registry into the content pointer index."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from prometheus_client import Counter

from ens_index.core.config import Settings
from ens_index.core.http import get_request_headers
from ens_index.core.logging import get_run_logger
from ens_index.indexer import decoder
from ens_index.indexer.errors import RegistryError
from ens_index.indexer.registry import RegistryPager
from ens_index.models import ContentPointer, RegistryRecord
from ens_index.snapshot import Accumulator, SnapshotStore

logger = get_run_logger("indexer")

POINTERS_DECODED = Counter(
    "index_pointers_decoded_total", "Total number of pointers indexed", ["scheme"]
)
RECORDS_SKIPPED = Counter(
    "index_records_skipped_total",
    "Total number of registry records without a usable content-hash",
)


class IndexAccumulator(Accumulator[ContentPointer]):
    """The growing index of one crawl."""

    def resume(self) -> str:
        """Load any previous index and return the cursor to continue from.

        Returns:
            Name of the last indexed pointer, or "" for a fresh start
        """
        self.load()
        return self.cursor

    @property
    def cursor(self) -> str:
        return self.entries[-1].name if self.entries else ""


def pointer_from_record(record: RegistryRecord) -> ContentPointer | None:
    """Decode a registry record into a pointer, or None to skip it."""
    if not record.name or not record.content_hash:
        return None
    decoded = decoder.decode(record.content_hash)
    if decoded is None:
        logger.debug(
            "Skipping undecodable content-hash",
            name=record.name,
            codec=decoder.get_codec(record.content_hash),
        )
        return None
    return ContentPointer(name=record.name, scheme=decoded.scheme, value=decoded.value)


class Indexer:
    """Pages through the registry and accumulates decoded pointers."""

    def __init__(
        self,
        pager: RegistryPager,
        accumulator: IndexAccumulator,
        page_delay: float = 1.5,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        """Initialize indexer.

        Args:
            pager: Source of registry pages
            accumulator: Index being built, owned by this run
            page_delay: Seconds to wait between successful pages
            sleep: Awaitable sleep, ``asyncio.sleep`` by default
        """
        self.pager = pager
        self.accumulator = accumulator
        self.page_delay = page_delay
        self.sleep = sleep or asyncio.sleep

    def process_page(self, records: list[RegistryRecord], cursor: str) -> str:
        """Append the decodable records of a page.

        Args:
            records: One registry page in ascending name order
            cursor: Cursor the page was requested with

        Returns:
            Cursor for the next page
        """
        for record in records:
            if record.name:
                cursor = record.name
            pointer = pointer_from_record(record)
            if pointer is None:
                RECORDS_SKIPPED.inc()
                continue

            self.accumulator.append(pointer)
            POINTERS_DECODED.labels(scheme=pointer.scheme.value).inc()
            logger.info(
                "Found pointer",
                scheme=pointer.scheme.value,
                name=pointer.name,
                value=pointer.value,
            )
        return cursor

    async def run(self) -> int:
        """Crawl until the registry returns an empty page.

        Returns:
            Number of entries in the final index

        Raises:
            RegistryError: On a non-retryable registry failure
            SnapshotError: If a checkpoint cannot be written
        """
        cursor = self.accumulator.resume()
        try:
            while True:
                records = await self.pager.fetch_page(cursor)
                if not records:
                    break

                next_cursor = self.process_page(records, cursor)
                if next_cursor == cursor:
                    raise RegistryError(
                        f"Registry cursor did not advance past {cursor!r}"
                    )
                cursor = next_cursor

                self.accumulator.checkpoint()
                await self.sleep(self.page_delay)
        except BaseException as e:
            logger.error("Crawl aborted", error=repr(e), cursor=cursor)
            self.accumulator.final_checkpoint()
            raise

        self.accumulator.checkpoint()
        logger.info("Crawl complete", entries=len(self.accumulator))
        return len(self.accumulator)


async def run_indexer(config: Settings) -> int:
    """Build the indexer from settings and crawl to completion.

    Args:
        config: Application settings

    Returns:
        Number of entries in the final index
    """
    store = SnapshotStore(config.INDEX_PATH, ContentPointer)
    accumulator = IndexAccumulator(store)
    async with httpx.AsyncClient(
        headers=get_request_headers(config.REGISTRY_API_KEY),
        timeout=config.REGISTRY_TIMEOUT,
    ) as client:
        pager = RegistryPager(
            client,
            config.REGISTRY_URL,
            page_size=config.REGISTRY_PAGE_SIZE,
            retry_base_delay=config.REGISTRY_RETRY_BASE_DELAY,
            report_interval=config.RETRY_REPORT_INTERVAL,
        )
        indexer = Indexer(pager, accumulator, page_delay=config.REGISTRY_PAGE_DELAY)
        return await indexer.run()
