"""Content-hash decoding into index pointer schemes."""

import base64

from multiformats import CID, multicodec, varint
from multiformats.multicodec.err import MulticodecKeyError

from ens_index.models import DecodedContentHash, PointerScheme

IPFS_NAMESPACE_CODE = 0xE3
ARWEAVE_NAMESPACE_CODE = 0xB29910

# Keyed on multicodec code; table names differ across releases.
NAMESPACE_SCHEMES: dict[int, PointerScheme] = {
    IPFS_NAMESPACE_CODE: PointerScheme.IPFS,
    ARWEAVE_NAMESPACE_CODE: PointerScheme.ARWEAVE,
}


def _to_bytes(raw: bytes | str) -> bytes:
    if isinstance(raw, bytes):
        return raw
    hex_string = raw[2:] if raw[:2].lower() == "0x" else raw
    return bytes.fromhex(hex_string)


def _split(raw: bytes | str) -> tuple[int, bytes]:
    code, _, payload = varint.decode_raw(_to_bytes(raw))
    return code, bytes(payload)


def _ipfs_value(payload: bytes) -> str:
    cid = CID.decode(payload)
    if cid.codec.name == "dag-pb" and cid.hashfun.name == "sha2-256":
        return str(cid.set(base="base58btc", version=0))
    return str(cid.set(base="base32", version=1))


def _arweave_value(payload: bytes) -> str:
    return base64.urlsafe_b64encode(payload).rstrip(b"=").decode("ascii")


def get_codec(raw: bytes | str) -> str | None:
    """Name of the multicodec prefixing ``raw``, or None if unreadable.

    Codes missing from the installed multicodec table are returned in hex.
    """
    try:
        code, _ = _split(raw)
    except Exception:
        return None
    try:
        return multicodec.get(code=code).name
    except MulticodecKeyError:
        return hex(code)


def decode(raw: bytes | str) -> DecodedContentHash | None:
    """Decode a content-hash into its index scheme and locator.

    Only the ipfs and arweave namespaces are kept. Any other codec, and any
    input that fails to decode, yields None so the caller can skip the record.

    Args:
        raw: Content-hash bytes, or their hex form with optional ``0x`` prefix

    Returns:
        DecodedContentHash, or None if the record should be skipped
    """
    try:
        code, payload = _split(raw)
        scheme = NAMESPACE_SCHEMES.get(code)
        if scheme is None:
            return None
        if scheme is PointerScheme.IPFS:
            value = _ipfs_value(payload)
        else:
            value = _arweave_value(payload)
    except Exception:
        return None

    if not value:
        return None
    return DecodedContentHash(scheme=scheme, value=value)
