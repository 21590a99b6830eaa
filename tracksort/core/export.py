"""
Export of labeled track groups.

Supports M3U, CSV (one file per group) and a single JSON document.
"""

import csv
import json
import logging
import re
from pathlib import Path

from tracksort.core.cluster_stats import ClusterStats
from tracksort.core.clustering import Cluster

logger = logging.getLogger(__name__)

EXPORT_FORMATS: tuple[str, ...] = ("json", "csv", "m3u")

_TRACK_URI_PREFIX = "spotify:track:"
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]+')

_CSV_COLUMNS: tuple[str, ...] = (
    "Track URI",
    "Track Name",
    "Artist Name(s)",
    "Album Name",
    "Album Release Date",
    "Popularity",
    "Genres",
    "Album Image URL",
    "Track Preview URL",
)


def _playlist_filename(prefix: str, index: int, cluster: Cluster, suffix: str) -> str:
    label = _UNSAFE_FILENAME_RE.sub("-", cluster.display_label(index))
    return f"{prefix} {index + 1} [{label}]{suffix}"


class M3UExporter:
    """Exports groups to M3U playlists of track URIs."""

    def __init__(self, output_dir: Path, playlist_prefix: str = "Playlist"):
        """
        Initialize M3U exporter.

        Args:
            output_dir: Directory to save playlists
            playlist_prefix: Prefix for playlist filenames
        """
        self.output_dir = output_dir
        self.playlist_prefix = playlist_prefix
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_cluster(self, cluster: Cluster, cluster_index: int = 0) -> Path:
        """
        Export a single group to an M3U playlist.

        Args:
            cluster: Cluster to export
            cluster_index: Index for numbering (1-based in filename)

        Returns:
            Path to created playlist file
        """
        filename = _playlist_filename(self.playlist_prefix, cluster_index, cluster, ".m3u")
        playlist_path = self.output_dir / filename

        logger.info(f"Exporting cluster {cluster_index} to {filename}")

        with open(playlist_path, "w", encoding="utf-8") as f:
            f.write("#EXTM3U\n")
            f.write(f"#PLAYLIST:{cluster.display_label(cluster_index)}\n")
            for track in cluster.tracks:
                f.write(f"#EXTINF:-1,{track.artist} - {track.name or track.id}\n")
                f.write(f"{_TRACK_URI_PREFIX}{track.id}\n")

        logger.debug(f"Wrote {len(cluster.tracks)} tracks to {playlist_path}")
        return playlist_path

    def export_clusters(self, clusters: list[Cluster]) -> list[Path]:
        """Export every group; returns the created playlist paths."""
        logger.info(f"Exporting {len(clusters)} clusters to {self.output_dir}")
        playlist_paths = [self.export_cluster(c, cluster_index=i) for i, c in enumerate(clusters)]
        logger.info(f"Successfully exported {len(playlist_paths)} playlists")
        return playlist_paths


class CSVExporter:
    """Exports each group to a CSV file that track_loader can read back."""

    def __init__(self, output_dir: Path, playlist_prefix: str = "Playlist"):
        self.output_dir = output_dir
        self.playlist_prefix = playlist_prefix
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_cluster(self, cluster: Cluster, cluster_index: int = 0) -> Path:
        filename = _playlist_filename(self.playlist_prefix, cluster_index, cluster, ".csv")
        csv_path = self.output_dir / filename

        with open(csv_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(_CSV_COLUMNS)
            for track in cluster.tracks:
                writer.writerow(
                    [
                        f"{_TRACK_URI_PREFIX}{track.id}",
                        track.name,
                        track.artist,
                        track.album,
                        str(track.release_year),
                        str(track.popularity),
                        ",".join(track.genres),
                        track.image or "",
                        track.preview_url or "",
                    ]
                )

        logger.info("Wrote %s (%d tracks)", filename, cluster.track_count)
        return csv_path

    def export_clusters(self, clusters: list[Cluster]) -> list[Path]:
        logger.info("Exporting %d clusters to %s", len(clusters), self.output_dir)
        paths = [self.export_cluster(c, cluster_index=i) for i, c in enumerate(clusters)]
        logger.info("Exported %d CSV files", len(paths))
        return paths


class JSONExporter:
    """Exports all groups, with their statistics, to one JSON document."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def build_document(self, clusters: list[Cluster], name: str = "Playlist") -> dict:
        stats = ClusterStats.from_clusters(clusters)
        return {
            "name": name,
            "track_count": sum(c.track_count for c in clusters),
            "group_count": len(clusters),
            "groups": [
                {**c.to_dict(), "label": s.label, "stats": s.to_dict()}
                for c, s in zip(clusters, stats)
            ],
        }

    def export(self, clusters: list[Cluster], name: str = "Playlist") -> Path:
        """
        Write ``<name>.json`` into the output directory.

        Returns:
            Path to the created JSON file
        """
        safe_name = _UNSAFE_FILENAME_RE.sub("-", name)
        path = self.output_dir / f"{safe_name}.json"
        document = self.build_document(clusters, name=name)
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Exported {len(clusters)} groups to {path}")
        return path
