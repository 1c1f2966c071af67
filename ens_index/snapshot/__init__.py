"""Whole-document JSON snapshots of pipeline state."""

from ens_index.snapshot.accumulator import Accumulator
from ens_index.snapshot.store import SnapshotError, SnapshotStore

__all__ = ["Accumulator", "SnapshotError", "SnapshotStore"]
