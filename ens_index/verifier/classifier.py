"""Reduction of per-gateway probe results to a single status."""

from collections.abc import Sequence
from typing import NamedTuple

from ens_index.models import ProbeStatus
from ens_index.verifier.probe import GatewayResult

TIMEOUT_MARKER = "timeout"


class Classification(NamedTuple):
    """Aggregate outcome for one pointer."""

    status: ProbeStatus
    http_status: int | None
    gateway: str
    summary: str


def summarize(results: Sequence[GatewayResult]) -> str:
    """Human-readable tally of succeeded, errored and timed out gateways."""
    total = len(results)
    succeeded = sum(1 for r in results if r.succeeded)
    timed_out = sum(1 for r in results if r.http_status is None)
    errored = total - succeeded - timed_out
    return (
        f"{succeeded}/{total} successful, {errored} errored, {timed_out} timed out"
    )


def _outcome(result: GatewayResult) -> str:
    if result.http_status is None:
        return TIMEOUT_MARKER
    return str(result.http_status)


def _describe(results: Sequence[GatewayResult], marker: str | None = None) -> str:
    return ", ".join(f"{r.gateway}({marker or _outcome(r)})" for r in results)


def classify(results: Sequence[GatewayResult]) -> Classification:
    """Classify probe results; the first matching rule wins.

    1. Any HTTP 200: reachable, reported against the first such gateway in
       configured order.
    2. Every gateway answered 429: rateLimited.
    3. Every gateway timed out or failed to connect: timeout.
    4. Anything else: unreachable.

    Args:
        results: Probe results in configured gateway order

    Returns:
        Classification with the provenance string for the ``gateway`` field

    Raises:
        ValueError: If ``results`` is empty
    """
    if not results:
        raise ValueError("Cannot classify an empty probe result list")

    summary = summarize(results)

    first_success = next((r for r in results if r.succeeded), None)
    if first_success is not None:
        return Classification(
            status=ProbeStatus.REACHABLE,
            http_status=first_success.http_status,
            gateway=first_success.gateway,
            summary=summary,
        )

    if all(r.http_status == 429 for r in results):
        return Classification(
            status=ProbeStatus.RATE_LIMITED,
            http_status=None,
            gateway=_describe(results, "429"),
            summary=summary,
        )

    if all(r.http_status is None for r in results):
        return Classification(
            status=ProbeStatus.TIMEOUT,
            http_status=None,
            gateway=_describe(results, TIMEOUT_MARKER),
            summary=summary,
        )

    return Classification(
        status=ProbeStatus.UNREACHABLE,
        http_status=None,
        gateway=_describe(results),
        summary=summary,
    )
