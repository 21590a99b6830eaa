"""
Playlist utilities that work on track lists and clustering results.

None of these touch the clustering engine itself; they cover the chores
around it: finding duplicates, filtering by artist, comparing playlists and
summarising genres.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from tracksort.core.clustering import Cluster
from tracksort.core.track import TrackRecord

logger = logging.getLogger(__name__)

# Energy heuristic: years are measured from 1950 across a 75-year span.
_ENERGY_BASE_YEAR = 1950
_ENERGY_YEAR_SPAN = 75


def _all_tracks(clusters: Iterable[Cluster]) -> list[TrackRecord]:
    return [t for c in clusters for t in c.tracks]


def _duplicate_key(track: TrackRecord) -> str:
    return f"{track.name.lower()}-{track.artist.lower()}"


def extract_by_artist(clusters: Iterable[Cluster], artist_name: str) -> list[TrackRecord]:
    """All tracks whose artist equals or contains ``artist_name`` (case-insensitive)."""
    needle = artist_name.lower()
    return [t for t in _all_tracks(clusters) if needle in t.artist.lower()]


def detect_duplicates(tracks: Sequence[TrackRecord]) -> list[list[TrackRecord]]:
    """
    Group tracks sharing the same name and artist (case-insensitive).

    Returns:
        Groups of two or more tracks, in order of first appearance
    """
    groups: dict[str, list[TrackRecord]] = {}
    for track in tracks:
        groups.setdefault(_duplicate_key(track), []).append(track)
    return [group for group in groups.values() if len(group) > 1]


def remove_duplicates(
    tracks: Sequence[TrackRecord], keep_most_popular: bool = True
) -> list[TrackRecord]:
    """
    Keep one track per name/artist pair.

    Args:
        tracks: Input tracks
        keep_most_popular: Keep the most popular copy; otherwise keep the
            most recently released one. Ties keep the earlier copy.

    Returns:
        De-duplicated tracks, ordered by first appearance of each pair
    """
    kept: dict[str, TrackRecord] = {}
    for track in tracks:
        key = _duplicate_key(track)
        existing = kept.get(key)
        if existing is None:
            kept[key] = track
        elif keep_most_popular and track.popularity > existing.popularity:
            kept[key] = track
        elif not keep_most_popular and track.release_year > existing.release_year:
            kept[key] = track

    removed = len(tracks) - len(kept)
    if removed:
        logger.info(f"Removed {removed} duplicate tracks")
    return list(kept.values())


def calculate_energy(track: TrackRecord) -> int:
    """Heuristic 0-100 energy score: newer and more popular means higher."""
    year_component = min(
        100.0, (track.release_year - _ENERGY_BASE_YEAR) / _ENERGY_YEAR_SPAN * 100
    )
    return round((year_component + track.popularity) / 2)


def genre_distribution(clusters: Iterable[Cluster], limit: int = 20) -> list[tuple[str, int]]:
    """Most common raw genre tags across all clusters, highest count first."""
    return tag_distribution(_all_tracks(clusters), limit=limit)


def tag_distribution(tracks: Iterable[TrackRecord], limit: int = 20) -> list[tuple[str, int]]:
    counts = Counter(g for t in tracks for g in t.genres)
    return counts.most_common(limit)


def find_intersection(
    tracks1: Sequence[TrackRecord], tracks2: Sequence[TrackRecord]
) -> list[TrackRecord]:
    """Tracks of ``tracks1`` whose id also appears in ``tracks2``."""
    ids2 = {t.id for t in tracks2}
    return [t for t in tracks1 if t.id in ids2]


def find_difference(
    tracks1: Sequence[TrackRecord], tracks2: Sequence[TrackRecord]
) -> list[TrackRecord]:
    """Tracks of ``tracks1`` whose id does not appear in ``tracks2``."""
    ids2 = {t.id for t in tracks2}
    return [t for t in tracks1 if t.id not in ids2]
