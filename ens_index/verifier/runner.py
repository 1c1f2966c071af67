"""Resumable verification of indexed IPFS pointers."""

from collections.abc import Callable
from datetime import datetime, timezone

import httpx
from prometheus_client import Counter

from ens_index.core.config import Settings
from ens_index.core.http import get_request_headers
from ens_index.core.logging import get_run_logger
from ens_index.models import ContentPointer, PointerScheme, VerifiedPointer
from ens_index.snapshot import Accumulator, SnapshotStore
from ens_index.verifier.classifier import Classification, classify
from ens_index.verifier.probe import GatewayProbe

logger = get_run_logger("verifier")

VERIFICATIONS = Counter(
    "verifier_pointers_checked_total", "Total number of pointers verified", ["status"]
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IndexLoader:
    """Reads the crawl's index and selects the pointers to verify."""

    def __init__(self, store: SnapshotStore[ContentPointer]) -> None:
        self.store = store

    def load(self) -> list[ContentPointer]:
        """Load the index; a missing or unparsable index is empty."""
        entries = self.store.load()
        if entries is None:
            logger.warning("Index not available", path=str(self.store.path))
            return []
        return entries

    def ipfs_pointers(self) -> list[ContentPointer]:
        """IPFS pointers in index order; arweave entries are never probed."""
        return [p for p in self.load() if p.scheme is PointerScheme.IPFS]


class ResolvedAccumulator(Accumulator[VerifiedPointer]):
    """Verified pointers of one run, appended in verification order."""

    def resume(self) -> set[str]:
        """Load previous results.

        Returns:
            Names that were already verified
        """
        self.load()
        return {entry.name for entry in self.entries}


class Verifier:
    """Probes each pending IPFS pointer and records the classified outcome."""

    def __init__(
        self,
        loader: IndexLoader,
        probe: GatewayProbe,
        accumulator: ResolvedAccumulator,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize verifier.

        Args:
            loader: Source of pointers to verify
            probe: Gateway prober
            accumulator: Results being built, owned by this run
            clock: Returns the ``checkedAt`` timestamp
        """
        self.loader = loader
        self.probe = probe
        self.accumulator = accumulator
        self.clock = clock

    async def verify(
        self, pointer: ContentPointer
    ) -> tuple[VerifiedPointer, Classification]:
        """Probe one pointer and annotate it with the outcome."""
        results = await self.probe.probe(pointer.value)
        outcome = classify(results)
        verified = VerifiedPointer.from_pointer(
            pointer,
            status=outcome.status,
            http_status=outcome.http_status,
            gateway=outcome.gateway,
            checked_at=self.clock(),
        )
        return verified, outcome

    async def run(self) -> int:
        """Verify every IPFS pointer not already present in the results.

        Returns:
            Number of entries in the final results

        Raises:
            SnapshotError: If a checkpoint cannot be written
        """
        done = self.accumulator.resume()
        pending = [p for p in self.loader.ipfs_pointers() if p.name not in done]
        logger.info("Verifying pointers", pending=len(pending), already_checked=len(done))

        try:
            for pointer in pending:
                logger.info("Checking pointer", name=pointer.name, value=pointer.value)
                verified, outcome = await self.verify(pointer)
                self.accumulator.append(verified)
                VERIFICATIONS.labels(status=outcome.status.value).inc()
                logger.info(
                    "Checked pointer",
                    name=pointer.name,
                    status=outcome.status.value,
                    http_status=outcome.http_status
                    if outcome.http_status is not None
                    else "timeout",
                    summary=outcome.summary,
                )
                self.accumulator.checkpoint()
        except BaseException as e:
            logger.error("Verification aborted", error=repr(e))
            self.accumulator.final_checkpoint()
            raise

        self.accumulator.checkpoint()
        logger.info(
            "Wrote results",
            entries=len(self.accumulator),
            path=str(self.accumulator.store.path),
        )
        return len(self.accumulator)


async def run_verifier(config: Settings) -> int:
    """Build the verifier from settings and check every pending pointer.

    Args:
        config: Application settings

    Returns:
        Number of entries in the final results
    """
    loader = IndexLoader(SnapshotStore(config.INDEX_PATH, ContentPointer))
    accumulator = ResolvedAccumulator(
        SnapshotStore(config.RESOLVED_PATH, VerifiedPointer)
    )
    async with httpx.AsyncClient(
        headers=get_request_headers(),
        timeout=config.GATEWAY_TIMEOUT,
    ) as client:
        probe = GatewayProbe(client, config.GATEWAYS, timeout=config.GATEWAY_TIMEOUT)
        verifier = Verifier(loader, probe, accumulator)
        return await verifier.run()
