"""Data models for indexed and verified content pointers."""

from ens_index.models.pointer import (
    ContentPointer,
    DecodedContentHash,
    PointerScheme,
    ProbeStatus,
    RegistryRecord,
    VerifiedPointer,
)

__all__ = [
    "ContentPointer",
    "DecodedContentHash",
    "PointerScheme",
    "ProbeStatus",
    "RegistryRecord",
    "VerifiedPointer",
]
