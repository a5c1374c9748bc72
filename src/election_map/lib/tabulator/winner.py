"""Plurality winner selection."""

from collections.abc import Mapping

from election_map.lib.tabulator.types import UNKNOWN, TieBreak


def determine_winner(votes: Mapping[str, int], tie_break: TieBreak = TieBreak.SCAN_ORDER) -> str:
    """Return the party holding the strict maximum of ``votes``.

    With ``TieBreak.SCAN_ORDER`` a tie goes to the first party that reached
    the maximum while scanning the mapping left to right, so the outcome
    depends on insertion order. ``TieBreak.ALPHABETICAL`` picks the
    alphabetically smallest of the tied parties instead.

    Args:
        votes: Party → vote count.
        tie_break: Rule applied to tied leaders.

    Returns:
        The winning party, or ``UNKNOWN`` when the mapping is empty or
        every count is zero.
    """
    max_votes = 0
    winner = UNKNOWN
    for party, count in votes.items():
        if count > max_votes:
            max_votes = count
            winner = party

    if winner == UNKNOWN or tie_break is TieBreak.SCAN_ORDER:
        return winner

    leaders = [party for party, count in votes.items() if count == max_votes]
    return min(leaders)
