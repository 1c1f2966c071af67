"""Gateway reachability checks for indexed IPFS pointers."""

from ens_index.verifier.classifier import Classification, classify, summarize
from ens_index.verifier.probe import GatewayProbe, GatewayResult
from ens_index.verifier.runner import (
    IndexLoader,
    ResolvedAccumulator,
    Verifier,
    run_verifier,
)

__all__ = [
    "Classification",
    "GatewayProbe",
    "GatewayResult",
    "IndexLoader",
    "ResolvedAccumulator",
    "Verifier",
    "classify",
    "run_verifier",
    "summarize",
]
