"""FIPS identifier helpers and boundary-id candidate generation.

Boundary features carry zero-padded 5-digit county codes ("01009"), while
the results table stores county ids as bare numbers ("1009"), and a handful
of counties differ outright between the two sources. ``candidate_keys``
lists, in trial order, every storage key a boundary id may correspond to.
"""

from election_map.lib.geography.reference import ReferenceTables


def pad_county_fips(topology_id: str | int) -> str:
    """Zero-pad a county identifier to 5 digits."""
    return str(topology_id).strip().zfill(5)


def state_fips_of(topology_id: str | int) -> str:
    """Return the 2-digit state FIPS prefix of a county identifier."""
    return pad_county_fips(topology_id)[:2]


def _strip_zeros(code: str) -> str:
    return code.lstrip("0") or "0"


def candidate_keys(topology_id: str | int, state: str, year: int, tables: ReferenceTables) -> tuple[str, ...]:
    """Return the storage keys to try for a boundary id, in trial order.

    Order: corrected id, original id, corrected id without leading zeros,
    the 3-digit county suffix of the corrected id, and that suffix without
    leading zeros. Duplicates are dropped, keeping the first occurrence.

    Args:
        topology_id: County identifier from the boundary collection.
        state: State name the lookup is scoped to.
        year: Election year (corrections can be year-specific).
        tables: Reference tables holding the correction list.

    Returns:
        Distinct candidate keys.
    """
    original = pad_county_fips(topology_id)
    corrected = tables.correct_topology_id(state, year, original)
    suffix = corrected[-3:]

    candidates = (
        corrected,
        original,
        _strip_zeros(corrected),
        suffix,
        _strip_zeros(suffix),
    )
    return tuple(dict.fromkeys(candidates))
