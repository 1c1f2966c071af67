"""Tests for probe outcome classification."""

import pytest

from ens_index.models import ProbeStatus
from ens_index.verifier.classifier import classify, summarize
from ens_index.verifier.probe import GatewayResult

GW1 = "https://ipfs.io/ipfs/"
GW2 = "https://cloudflare-ipfs.com/ipfs/"


def results(status_1: int | None, status_2: int | None) -> list[GatewayResult]:
    return [
        GatewayResult(GW1, status_1, status_1 == 200),
        GatewayResult(GW2, status_2, status_2 == 200),
    ]


def test_any_success_is_reachable_with_that_gateway_only() -> None:
    outcome = classify(results(200, 404))

    assert outcome.status is ProbeStatus.REACHABLE
    assert outcome.http_status == 200
    assert outcome.gateway == GW1


def test_second_gateway_success_is_reachable() -> None:
    outcome = classify(results(None, 200))

    assert outcome.status is ProbeStatus.REACHABLE
    assert outcome.gateway == GW2


def test_first_successful_gateway_wins_tie() -> None:
    outcome = classify(results(200, 200))

    assert outcome.gateway == GW1


def test_success_takes_precedence_over_rate_limit() -> None:
    outcome = classify(results(429, 200))

    assert outcome.status is ProbeStatus.REACHABLE
    assert outcome.gateway == GW2


def test_all_429_is_rate_limited() -> None:
    outcome = classify(results(429, 429))

    assert outcome.status is ProbeStatus.RATE_LIMITED
    assert outcome.http_status is None
    assert outcome.gateway == f"{GW1}(429), {GW2}(429)"


def test_all_null_is_timeout() -> None:
    outcome = classify(results(None, None))

    assert outcome.status is ProbeStatus.TIMEOUT
    assert outcome.http_status is None
    assert outcome.gateway == f"{GW1}(timeout), {GW2}(timeout)"


def test_mixed_failures_are_unreachable() -> None:
    outcome = classify(results(404, None))

    assert outcome.status is ProbeStatus.UNREACHABLE
    assert outcome.http_status is None
    assert outcome.gateway == f"{GW1}(404), {GW2}(timeout)"


def test_partial_rate_limit_is_unreachable() -> None:
    outcome = classify(results(429, None))

    assert outcome.status is ProbeStatus.UNREACHABLE
    assert outcome.gateway == f"{GW1}(429), {GW2}(timeout)"


def test_empty_results_are_rejected() -> None:
    with pytest.raises(ValueError):
        classify([])


@pytest.mark.parametrize(
    ("statuses", "expected"),
    [
        ((200, 404), "1/2 successful, 1 errored, 0 timed out"),
        ((404, None), "0/2 successful, 1 errored, 1 timed out"),
        ((None, None), "0/2 successful, 0 errored, 2 timed out"),
        ((200, 200), "2/2 successful, 0 errored, 0 timed out"),
    ],
)
def test_summary_counts(statuses: tuple, expected: str) -> None:
    assert summarize(results(*statuses)) == expected
    assert classify(results(*statuses)).summary == expected
