"""Display-ready statistics derived from a Cluster.

Kept free of any output concerns so the CLI summary, exporters and tests can
share it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tracksort.core.labeler import dominant_genres
from tracksort.core.library_tools import calculate_energy

if TYPE_CHECKING:
    from tracksort.core.clustering import Cluster

# Bar characters used for popularity / energy displays.
_BAR_FULL: str = "█"
_BAR_EMPTY: str = "░"
_BAR_WIDTH: int = 10

_TOP_GENRES: int = 3


def _bars(value: float) -> str:
    """Ten-character bar for a value on a 0-100 scale."""
    filled = round(max(0.0, min(100.0, value)) / 100 * _BAR_WIDTH)
    return _BAR_FULL * filled + _BAR_EMPTY * (_BAR_WIDTH - filled)


@dataclass(frozen=True)
class ClusterStats:
    """Computed display values for a single cluster."""

    index: int
    label: str
    track_count: int
    year_min: int
    year_max: int
    year_mean: float
    popularity_mean: float  # 0-100
    energy_mean: float  # 0-100, see library_tools.calculate_energy
    top_genres: list[tuple[str, int]] = field(default_factory=list)
    # Sorted descending by count; empty when no member tag is recognised.

    # ── Class constructor ─────────────────────────────────────────────────────

    @classmethod
    def from_cluster(cls, cluster: Cluster, index: int | None = None) -> ClusterStats:
        """Build a ``ClusterStats`` from a non-empty ``Cluster``."""
        if not cluster.tracks:
            raise ValueError("Cannot compute statistics for an empty cluster")

        position = cluster.cluster_id if index is None else index
        years = [t.release_year for t in cluster.tracks]
        n = len(cluster.tracks)
        return cls(
            index=position,
            label=cluster.display_label(position),
            track_count=n,
            year_min=min(years),
            year_max=max(years),
            year_mean=sum(years) / n,
            popularity_mean=sum(t.popularity for t in cluster.tracks) / n,
            energy_mean=sum(calculate_energy(t) for t in cluster.tracks) / n,
            top_genres=dominant_genres(cluster.tracks, limit=_TOP_GENRES),
        )

    @staticmethod
    def from_clusters(clusters: list[Cluster]) -> list[ClusterStats]:
        """Convert a list of clusters in one call, numbering them by position."""
        return [ClusterStats.from_cluster(c, i) for i, c in enumerate(clusters)]

    # ── Display properties ────────────────────────────────────────────────────

    @property
    def year_range_str(self) -> str:
        """Release-year span, e.g. ``'1975–1979'`` or ``'1994'``."""
        if self.year_min == self.year_max:
            return str(self.year_min)
        return f"{self.year_min}–{self.year_max}"

    @property
    def popularity_bars(self) -> str:
        return _bars(self.popularity_mean)

    @property
    def energy_bars(self) -> str:
        return _bars(self.energy_mean)

    @property
    def track_count_str(self) -> str:
        """Track count with pluralised label, e.g. ``'23 tracks'``."""
        noun = "track" if self.track_count == 1 else "tracks"
        return f"{self.track_count} {noun}"

    @property
    def top_genres_str(self) -> str:
        """Comma-separated top genres, or ``'-'`` when none were recognised."""
        if not self.top_genres:
            return "-"
        return ", ".join(genre for genre, _ in self.top_genres)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "label": self.label,
            "track_count": self.track_count,
            "year_min": self.year_min,
            "year_max": self.year_max,
            "year_mean": round(self.year_mean, 1),
            "popularity_mean": round(self.popularity_mean, 1),
            "energy_mean": round(self.energy_mean, 1),
            "top_genres": [{"genre": g, "count": c} for g, c in self.top_genres],
        }

    def __str__(self) -> str:
        return (
            f"[{self.label}] {self.track_count_str} | {self.year_range_str} | "
            f"popularity {self.popularity_bars} | {self.top_genres_str}"
        )
