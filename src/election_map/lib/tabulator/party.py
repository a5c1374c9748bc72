"""Party affiliation normalization."""

from election_map.lib.tabulator.types import DEMOCRAT, REPUBLICAN


def normalize_party(raw: str | None) -> str:
    """Map a raw party affiliation string to a canonical party identifier.

    Matching is a case-insensitive substring test, so ``"REPUBLICAN PARTY"``,
    ``"gop"`` and ``"Republican"`` all collapse to ``REPUBLICAN``, and
    ``"DEMOCRATIC-FARMER-LABOR"`` collapses to ``DEMOCRAT``. Any other label is
    kept as its own identifier, upper-cased and trimmed.

    Args:
        raw: The party string as it appears in the results table.

    Returns:
        ``REPUBLICAN``, ``DEMOCRAT``, or the normalized third-party label.
    """
    if raw is None:
        return ""
    label = str(raw).strip()
    lowered = label.lower()
    if "republican" in lowered or "gop" in lowered:
        return REPUBLICAN
    if "democrat" in lowered:
        return DEMOCRAT
    return label.upper()
