"""Append-only pointer sequences checkpointed through a snapshot store."""

from collections.abc import Iterator
from typing import Generic

from ens_index.core.logging import get_logger
from ens_index.snapshot.store import PointerT, SnapshotError, SnapshotStore

logger = get_logger().bind(module="accumulator")


class Accumulator(Generic[PointerT]):
    """In-memory sequence owned by one pipeline run.

    Appending is the only mutation. ``checkpoint`` rewrites the whole
    snapshot; pipelines call it after every unit of work.
    """

    def __init__(self, store: SnapshotStore[PointerT]) -> None:
        self.store = store
        self.entries: list[PointerT] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[PointerT]:
        return iter(self.entries)

    def load(self) -> bool:
        """Replace the sequence with the stored snapshot, if any.

        Returns:
            True if a previous snapshot was loaded
        """
        existing = self.store.load()
        if existing is None:
            logger.info("Starting fresh", path=str(self.store.path))
            self.entries = []
            return False

        self.entries = list(existing)
        logger.info(
            "Resuming from previous run",
            path=str(self.store.path),
            entries=len(self.entries),
        )
        return True

    def append(self, entry: PointerT) -> None:
        self.entries.append(entry)

    def checkpoint(self) -> None:
        """Persist the full sequence.

        Raises:
            SnapshotError: If the snapshot cannot be written
        """
        self.store.save(self.entries)
        logger.info(
            "Progress saved", path=str(self.store.path), entries=len(self.entries)
        )

    def final_checkpoint(self) -> bool:
        """Best-effort checkpoint used when a run is aborting.

        Returns:
            True if the snapshot was written
        """
        try:
            self.checkpoint()
        except SnapshotError as e:
            logger.error("Final snapshot failed", error=str(e))
            return False
        return True
