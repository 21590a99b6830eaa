"""
Human-readable labels for track groups.

A label is "<Primary>[ & <Secondary>] <decade>s", e.g. "Rock & Indie Pop 1990s".
Primary/secondary are the two vocabulary entries matched by the most member
tags; the decade comes from the members' mean release year. Groups with no
recognised tags fall back to "Mix <decade>s".
"""

import logging
import math
from collections.abc import Sequence

from tracksort.core.genre_vocabulary import GENRE_INDEX, matching_genres
from tracksort.core.track import TrackRecord

logger = logging.getLogger(__name__)

FALLBACK_LABEL = "Mix"


def mean_year(tracks: Sequence[TrackRecord]) -> float:
    if not tracks:
        raise ValueError("Cannot compute the mean year of an empty group")
    return sum(t.release_year for t in tracks) / len(tracks)


def decade_of(tracks: Sequence[TrackRecord]) -> int:
    """Decade boundary of the mean release year (mean 1994.3 -> 1990)."""
    return math.floor(mean_year(tracks) / 10) * 10


def dominant_genres(tracks: Sequence[TrackRecord], limit: int = 2) -> list[tuple[str, int]]:
    """
    Rank vocabulary entries by how many member tags contain them.

    Every tag of every member is counted (tags are not de-duplicated across
    members). Zero-count entries are dropped. Equal counts rank the longer,
    more specific entry first ("synth-pop" before "pop"), then vocabulary order.

    Returns:
        Up to ``limit`` (genre, count) pairs, highest count first
    """
    counts: dict[str, int] = {}
    for track in tracks:
        for tag in track.genres:
            for genre in matching_genres(tag):
                counts[genre] = counts.get(genre, 0) + 1

    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], -len(kv[0]), GENRE_INDEX[kv[0]]))
    return ranked[:limit]


def _capitalize(genre: str) -> str:
    return genre[:1].upper() + genre[1:]


def compose_label(primary: str | None, secondary: str | None, decade: int) -> str:
    """
    Join the genre part and the decade.

    The secondary is dropped when it equals the primary or when either is a
    substring of the other ("rock" / "indie rock").
    """
    if primary is None:
        return f"{FALLBACK_LABEL} {decade}s"

    label = _capitalize(primary)
    if (
        secondary
        and secondary != primary
        and secondary not in primary
        and primary not in secondary
    ):
        label += f" & {_capitalize(secondary)}"
    return f"{label} {decade}s"


def label_cluster(tracks: Sequence[TrackRecord]) -> str:
    """
    Derive the label for a non-empty group of tracks.

    Raises:
        ValueError: If ``tracks`` is empty (empty groups are never labeled).
    """
    if not tracks:
        raise ValueError("Cannot label an empty group")

    decade = decade_of(tracks)
    top = dominant_genres(tracks, limit=2)
    primary = top[0][0] if top else None
    secondary = top[1][0] if len(top) > 1 else None
    label = compose_label(primary, secondary, decade)
    logger.debug(f"Labeled {len(tracks)} tracks as '{label}' (top genres: {top})")
    return label
