"""Snapshot store persisting a full pointer sequence as one JSON document."""

import contextlib
import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from ens_index.core.logging import get_logger
from ens_index.models import ContentPointer

logger = get_logger().bind(module="snapshot_store")

PointerT = TypeVar("PointerT", bound=ContentPointer)


class SnapshotError(Exception):
    """Raised when a snapshot cannot be written."""


class SnapshotStore(Generic[PointerT]):
    """Reads and writes the whole pointer sequence at a fixed path.

    Every ``save`` rewrites the complete document through a temporary file
    in the same directory followed by ``os.replace``, so a reader sees either
    the previous document or the new one.
    """

    def __init__(self, path: Path, model: type[PointerT]):
        """Initialize snapshot store.

        Args:
            path: Location of the JSON document
            model: Pointer model the document's entries validate against
        """
        self.path = Path(path)
        self.model = model
        self._adapter = TypeAdapter(list[model])  # type: ignore[valid-type]

    def load(self) -> list[PointerT] | None:
        """Load the persisted sequence.

        Returns:
            The stored entries in document order, or None when the file is
            missing, unreadable or does not hold a valid pointer array
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Snapshot unreadable", path=str(self.path), error=str(e))
            return None

        try:
            entries = self._adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                "Snapshot unparsable, ignoring it",
                path=str(self.path),
                error=str(e),
            )
            return None

        return entries

    def save(self, entries: Sequence[PointerT]) -> None:
        """Overwrite the document with ``entries``.

        Args:
            entries: Full sequence to persist, in order

        Raises:
            SnapshotError: If the document cannot be written
        """
        document = [entry.to_document() for entry in entries]
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                json.dump(document, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise SnapshotError(f"Failed to write snapshot {self.path}: {e}") from e
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()

        logger.debug("Snapshot saved", path=str(self.path), entries=len(document))
