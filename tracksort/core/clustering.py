"""
Grouping tracks into labeled clusters.

Pipeline: validate -> vectorize -> k-means (k-means++ seeding) -> group ->
drop empty clusters -> re-index -> label.

Every input track ends up in exactly one returned Cluster, and no returned
Cluster is empty, so fewer than K clusters may come back.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

import numpy as np

from tracksort.core.kmeans import DEFAULT_MAX_ITER, KMeansResult, kmeans
from tracksort.core.labeler import decade_of, label_cluster, mean_year
from tracksort.core.track import TrackRecord
from tracksort.core.vectorizer import (
    VECTORIZER_MODES,
    FeatureWeights,
    get_vectorizer,
)

logger = logging.getLogger(__name__)

__all__ = ["VECTORIZER_MODES", "Cluster", "TrackClusterer", "relabel", "suggest_group_count"]

# Default group-count policy: one group per ~15 tracks, between 4 and 8 groups.
DEFAULT_TRACKS_PER_GROUP = 15
DEFAULT_MIN_GROUPS = 4
DEFAULT_MAX_GROUPS = 8


@dataclass
class Cluster:
    """A labeled group of tracks."""

    cluster_id: int
    centroid: list[float]
    tracks: list[TrackRecord] = field(default_factory=list)
    label: str | None = None

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    @property
    def mean_year(self) -> float:
        return mean_year(self.tracks)

    @property
    def decade(self) -> int:
        return decade_of(self.tracks)

    def display_label(self, index: int | None = None) -> str:
        """Label, or "Group N" (1-based) when none has been assigned."""
        if self.label:
            return self.label
        position = self.cluster_id if index is None else index
        return f"Group {position + 1}"

    def to_dict(self) -> dict:
        return {
            "cluster_id": self.cluster_id,
            "label": self.label,
            "track_count": self.track_count,
            "mean_year": round(self.mean_year, 1) if self.tracks else None,
            "centroid": [round(float(v), 6) for v in self.centroid],
            "tracks": [t.to_dict() for t in self.tracks],
        }


def suggest_group_count(
    n_tracks: int,
    tracks_per_group: int = DEFAULT_TRACKS_PER_GROUP,
    min_groups: int = DEFAULT_MIN_GROUPS,
    max_groups: int = DEFAULT_MAX_GROUPS,
) -> int:
    """
    Pick K as clamp(n_tracks // tracks_per_group, min_groups, max_groups).

    The result is never below 1; the engine clamps it to the track count.
    """
    if tracks_per_group <= 0:
        raise ValueError("tracks_per_group must be positive")
    if min_groups > max_groups:
        raise ValueError(f"min_groups ({min_groups}) exceeds max_groups ({max_groups})")
    k = max(min_groups, min(n_tracks // tracks_per_group, max_groups))
    return max(1, k)


def relabel(clusters: Sequence[Cluster], index: int, new_label: str) -> list[Cluster]:
    """
    Rename one cluster without re-clustering.

    Returns a new list; the input clusters are left untouched.

    Raises:
        IndexError: If index is out of range.
        ValueError: If new_label is blank.
    """
    if not 0 <= index < len(clusters):
        raise IndexError(f"No cluster at index {index} (have {len(clusters)})")
    label = new_label.strip()
    if not label:
        raise ValueError("Cluster label must not be blank")
    updated = list(clusters)
    updated[index] = replace(clusters[index], label=label, tracks=list(clusters[index].tracks))
    return updated


class TrackClusterer:
    """Clusters tracks into labeled groups using K-means."""

    def __init__(
        self,
        weights: FeatureWeights | None = None,
        vectorizer_mode: str = "genre-temporal",
        max_iter: int = DEFAULT_MAX_ITER,
        random_state: int | None = None,
        time_budget: float | None = None,
        min_year: int | None = None,
    ):
        """
        Initialize track clusterer.

        Args:
            weights: Feature block weights (default: year 1.0, popularity 0.1, genre 4.0)
            vectorizer_mode: One of VECTORIZER_MODES
            max_iter: Cap on Lloyd iterations
            random_state: Seed for k-means++ initialization (None = random)
            time_budget: Optional wall-clock limit for the Lloyd loop, in seconds
            min_year: Lower edge of the temporal window (default 1960)
        """
        vectorizer_kwargs = {"min_year": min_year} if min_year is not None else {}
        self.vectorizer = get_vectorizer(vectorizer_mode, weights, **vectorizer_kwargs)
        self.max_iter = max_iter
        self.random_state = random_state
        self.time_budget = time_budget

    # ── Public API ─────────────────────────────────────────────────────────────

    def cluster(self, tracks: Sequence[TrackRecord], k: int) -> list[Cluster]:
        """
        Group tracks into at most ``k`` labeled clusters.

        Args:
            tracks: Deduplicated, fully-defaulted track records
            k: Requested number of groups (positive); clamped to len(tracks)

        Returns:
            Non-empty clusters, re-indexed 0..n-1 in centroid order

        Raises:
            ValueError: If k is not positive or a track is malformed.
        """
        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise ValueError(f"k must be a positive integer, got {k!r}")
        if not tracks:
            logger.info("No tracks to cluster")
            return []

        for track in tracks:
            track.validate()

        logger.info(
            f"Clustering {len(tracks)} tracks with the {self.vectorizer.mode} vectorizer "
            f"(k={min(k, len(tracks))})"
        )

        vectors = self.vectorizer.vectorize_all(tracks)
        result = kmeans(
            vectors,
            k,
            seed=self.random_state,
            max_iter=self.max_iter,
            time_budget=self.time_budget,
        )
        clusters = self._build_clusters(tracks, result)

        for c in clusters:
            logger.info(f"Cluster {c.cluster_id}: {c.track_count} tracks, '{c.label}'")

        return clusters

    def assign(self, tracks: Sequence[TrackRecord], k: int) -> np.ndarray:
        """Raw cluster index per track (before empty clusters are dropped)."""
        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise ValueError(f"k must be a positive integer, got {k!r}")
        if not tracks:
            return np.empty(0, dtype=int)
        for track in tracks:
            track.validate()
        vectors = self.vectorizer.vectorize_all(tracks)
        result = kmeans(
            vectors,
            k,
            seed=self.random_state,
            max_iter=self.max_iter,
            time_budget=self.time_budget,
        )
        return result.labels

    # ── Private helpers ────────────────────────────────────────────────────────

    def _build_clusters(
        self, tracks: Sequence[TrackRecord], result: KMeansResult
    ) -> list[Cluster]:
        """Build labeled Cluster list from K-means labels, skipping empty ones."""
        clusters: list[Cluster] = []

        for cid, members in enumerate(result.members()):
            # Can happen when K exceeds the number of distinct vectors.
            if not members:
                logger.debug("Skipping empty cluster %d", cid)
                continue

            cluster_tracks = [tracks[i] for i in members]
            clusters.append(
                Cluster(
                    cluster_id=len(clusters),
                    centroid=result.centroids[cid].tolist(),
                    tracks=cluster_tracks,
                    label=label_cluster(cluster_tracks),
                )
            )

        return clusters
