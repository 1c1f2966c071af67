"""Pointer models persisted in the index and resolved-status snapshots."""

from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PointerScheme(str, Enum):
    """Content-hash namespaces kept in the index."""

    IPFS = "ipfs"
    ARWEAVE = "arweave"


class ProbeStatus(str, Enum):
    """Aggregate reachability of a pointer across all gateways."""

    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    RATE_LIMITED = "rateLimited"
    TIMEOUT = "timeout"


class DecodedContentHash(NamedTuple):
    """Scheme and locator decoded from a raw content-hash."""

    scheme: PointerScheme
    value: str


class RegistryRecord(BaseModel):
    """One domain record as returned by the registry query."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str | None = None
    content_hash: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RegistryRecord":
        """Build a record from the GraphQL ``domains`` item shape.

        Args:
            payload: ``{id, name, resolver: {contentHash} | null}``

        Returns:
            RegistryRecord with the resolver content-hash flattened
        """
        resolver = payload.get("resolver") or {}
        return cls(
            id=payload["id"],
            name=payload.get("name"),
            content_hash=resolver.get("contentHash"),
        )


class ContentPointer(BaseModel):
    """A decoded content-hash record, immutable once created."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    name: str = Field(..., min_length=1, description="ENS name of the domain")
    scheme: PointerScheme = Field(..., alias="type")
    value: str = Field(
        ..., min_length=1, description="CID for ipfs, transaction id for arweave"
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VerifiedPointer(ContentPointer):
    """A content pointer annotated with gateway probe results."""

    status: ProbeStatus
    http_status: int | None = Field(default=None, alias="httpStatus")
    checked_at: datetime = Field(..., alias="checkedAt")
    gateway: str

    @model_validator(mode="after")
    def check_http_status(self) -> "VerifiedPointer":
        """``httpStatus`` is present only for reachable pointers."""
        if self.status is ProbeStatus.REACHABLE and self.http_status is None:
            raise ValueError("reachable pointers require httpStatus")
        if self.status is not ProbeStatus.REACHABLE and self.http_status is not None:
            raise ValueError(f"httpStatus must be omitted for status {self.status}")
        return self

    @classmethod
    def from_pointer(
        cls,
        pointer: ContentPointer,
        *,
        status: ProbeStatus,
        gateway: str,
        checked_at: datetime,
        http_status: int | None = None,
    ) -> "VerifiedPointer":
        """Copy ``pointer`` and attach probe results."""
        return cls(
            name=pointer.name,
            scheme=pointer.scheme,
            value=pointer.value,
            status=status,
            http_status=http_status,
            checked_at=checked_at,
            gateway=gateway,
        )
