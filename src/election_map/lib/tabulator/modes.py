"""Reporting-mode resolution for a single county-year.

The results table reports each candidate's votes once per reporting mode.
Some years add an aggregate row (``TOTAL VOTES`` or ``TOTAL``) on top of the
component modes, so summing every mode would double count.
"""

from collections.abc import Mapping

TOTAL_VOTES = "TOTAL VOTES"
TOTAL = "TOTAL"

AGGREGATE_MODES: tuple[str, ...] = (TOTAL_VOTES, TOTAL)

COMPONENT_MODES: frozenset[str] = frozenset(
    {
        "EARLY VOTING",
        "LATE EARLY VOTING",
        "ELECTION DAY",
        "PROVISIONAL",
        "ABSENTEE",
        "MAIL-IN",
        "ABSENTEE BY MAIL",
    }
)


def _has_aggregate(modes: Mapping[str, Mapping[str, int]]) -> bool:
    return any(aggregate in modes for aggregate in AGGREGATE_MODES)


def select_modes(modes: Mapping[str, Mapping[str, int]]) -> list[str]:
    """Return the modes whose tallies make up the final county count.

    Precedence (first match wins):
      1. ``TOTAL VOTES`` alone
      2. ``TOTAL`` alone
      3. every non-component mode, or every mode when no aggregate exists

    Args:
        modes: Mode → (party → votes) for one county-year.

    Returns:
        Mode names in their original order.
    """
    for aggregate in AGGREGATE_MODES:
        if aggregate in modes:
            return [aggregate]

    # Component modes are only excluded alongside an aggregate, and there is none here.
    return [mode for mode in modes if mode not in COMPONENT_MODES or not _has_aggregate(modes)]


def resolve_modes(modes: Mapping[str, Mapping[str, int]]) -> dict[str, int]:
    """Collapse mode-partitioned tallies into one party → votes mapping.

    Args:
        modes: Mode → (party → votes) for one county-year.

    Returns:
        Party → votes, parties ordered by first appearance.
    """
    final: dict[str, int] = {}
    for mode in select_modes(modes):
        for party, votes in modes[mode].items():
            final[party] = final.get(party, 0) + votes
    return final
