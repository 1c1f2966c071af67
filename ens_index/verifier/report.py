"""Status tallies over a resolved-status snapshot."""

from collections import Counter
from collections.abc import Iterable

from ens_index.models import ProbeStatus, VerifiedPointer


def status_counts(entries: Iterable[VerifiedPointer]) -> dict[str, int]:
    """Count entries per status.

    Every status is present in the result, zero when unseen, in declaration
    order, followed by ``total``.
    """
    tally = Counter(entry.status for entry in entries)
    counts = {status.value: tally.get(status, 0) for status in ProbeStatus}
    counts["total"] = sum(tally.values())
    return counts
