"""Builders for registry payloads and pointers used across tests."""

import base64

from multiformats import CID

from ens_index.models import ContentPointer, PointerScheme

# Unsigned varint prefixes for the ipfs (0xe3) and arweave (0xb29910) namespaces.
IPFS_PREFIX = b"\xe3\x01"
ARWEAVE_PREFIX = b"\x90\xb2\xca\x05"

IPFS_CID_V0 = "QmRAQB6YaCyidP37UdDnjFY5vQuiBrcqdyoW1CuDgwxkD4"
OTHER_CID_V0 = "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"
ARWEAVE_RAW = bytes(range(32))
ARWEAVE_TX = base64.urlsafe_b64encode(ARWEAVE_RAW).rstrip(b"=").decode()

# Content-hash of IPFS_CID_V0 as published by ENS resolvers (CIDv1, dag-pb).
IPFS_CONTENT_HASH = (
    "0xe3010170122029f2d17be6139079dc48696d1f582a8530eb9805b561eda517e22a892c7e3f1f"
)
# Same digest with a bare CIDv0 multihash after the namespace.
IPFS_CONTENT_HASH_V0 = (
    "0xe301122029f2d17be6139079dc48696d1f582a8530eb9805b561eda517e22a892c7e3f1f"
)
ARWEAVE_CONTENT_HASH = (
    "0x90b2ca05"
    "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
)


def ipfs_content_hash(cid: str = IPFS_CID_V0) -> str:
    """Registry-style hex content-hash for an IPFS CID."""
    binary = bytes(CID.decode(cid).set(base="base32", version=1))
    return "0x" + (IPFS_PREFIX + binary).hex()


def arweave_content_hash(raw: bytes = ARWEAVE_RAW) -> str:
    """Registry-style hex content-hash for an Arweave transaction."""
    return "0x" + (ARWEAVE_PREFIX + raw).hex()


def domain(name: str | None, content_hash: str | None = None) -> dict:
    """GraphQL ``domains`` item; no content-hash means no resolver."""
    resolver = {"contentHash": content_hash} if content_hash is not None else None
    return {"id": f"id-{name}", "name": name, "resolver": resolver}


def ipfs_pointer(name: str, cid: str = IPFS_CID_V0) -> ContentPointer:
    return ContentPointer(name=name, scheme=PointerScheme.IPFS, value=cid)


def arweave_pointer(name: str, tx: str = ARWEAVE_TX) -> ContentPointer:
    return ContentPointer(name=name, scheme=PointerScheme.ARWEAVE, value=tx)
