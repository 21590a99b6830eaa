"""
CLI commands for tracksort.
"""

import json
import logging
import sys
from pathlib import Path

import click

from tracksort import __version__
from tracksort.core.cluster_stats import ClusterStats
from tracksort.core.clustering import TrackClusterer, suggest_group_count
from tracksort.core.export import EXPORT_FORMATS, CSVExporter, JSONExporter, M3UExporter
from tracksort.core.genre_vocabulary import genre_vector
from tracksort.core.library_tools import (
    detect_duplicates,
    find_difference,
    find_intersection,
    remove_duplicates,
    tag_distribution,
)
from tracksort.core.track import TrackRecord
from tracksort.core.track_loader import TrackLoadError, load_tracks
from tracksort.core.vectorizer import VECTORIZER_MODES
from tracksort.utils.config import Config, get_config

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _load_config(config_path: Path | None, verbose: bool = False) -> Config:
    config = Config(config_path) if config_path else get_config()
    level = "DEBUG" if verbose else str(config.get("log_level", "INFO")).upper()
    logging.getLogger().setLevel(getattr(logging, level, logging.INFO))
    return config


def _load_or_exit(path: Path) -> list[TrackRecord]:
    try:
        return load_tracks(path)
    except TrackLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """tracksort - Split a playlist into labeled genre/era groups."""
    pass


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--groups", "-k", type=int, help="Number of groups (default: derived from size)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible groupings")
@click.option(
    "--mode",
    type=click.Choice(VECTORIZER_MODES),
    default=None,
    help="Feature strategy: genre-temporal (default) or audio-features.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for exported groups (default: next to INPUT_PATH)",
)
@click.option(
    "--format",
    "export_format",
    type=click.Choice(EXPORT_FORMATS),
    default="m3u",
    help="Export format (default: m3u)",
)
@click.option(
    "--playlist-name",
    "-n",
    type=str,
    default="Playlist",
    help="Base name for exported groups (default: Playlist)",
)
@click.option("--dedupe", is_flag=True, help="Drop same name/artist duplicates first")
@click.option("--dry-run", is_flag=True, help="Group and report without writing any files")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/tracksort/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def group(
    input_path: Path,
    groups: int | None,
    seed: int | None,
    mode: str | None,
    output: Path | None,
    export_format: str,
    playlist_name: str,
    dedupe: bool,
    dry_run: bool,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """
    Group the tracks of a playlist export into labeled clusters.

    INPUT_PATH: JSON or CSV track export
    """
    config = _load_config(config_path, verbose)

    if groups is not None and groups <= 0:
        click.echo("Error: --groups must be a positive integer", err=True)
        sys.exit(1)

    tracks = _load_or_exit(input_path)
    if not tracks:
        click.echo("Error: No tracks found in input", err=True)
        sys.exit(1)
    click.echo(f"Loaded {len(tracks)} tracks from {input_path.name}")

    if dedupe:
        before = len(tracks)
        tracks = remove_duplicates(tracks)
        click.echo(f"Removed {before - len(tracks)} duplicates")

    if seed is None:
        seed = config.get("random_seed")

    try:
        k = groups or suggest_group_count(len(tracks), **config.get_group_policy())
        clusterer = TrackClusterer(
            weights=config.get_weights(),
            vectorizer_mode=mode or config.get("vectorizer_mode", "genre-temporal"),
            max_iter=int(config.get("max_iter", 300)),
            random_state=seed,
            min_year=config.get("min_year"),
        )
        clusters = clusterer.cluster(tracks, k)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"\nCreated {len(clusters)} groups (requested {k}):")
    for stats in ClusterStats.from_clusters(clusters):
        click.echo(f"  {stats.index + 1}. {stats}")

    output_dir = output or config.get_output_dir() or input_path.parent

    if dry_run:
        click.echo(
            f"\nDRY RUN: Would write {len(clusters)} groups as {export_format} to {output_dir}"
        )
        return

    if export_format == "json":
        path = JSONExporter(output_dir).export(clusters, name=playlist_name)
        click.echo(f"\nSaved groups to {path}")
        return

    exporter_cls = CSVExporter if export_format == "csv" else M3UExporter
    paths = exporter_cls(output_dir, playlist_prefix=playlist_name).export_clusters(clusters)
    click.echo(f"\nSuccessfully created {len(paths)} playlists:")
    for path in paths:
        click.echo(f"  {path.name}")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
def info(input_path: Path, format: str) -> None:
    """
    Display information about a playlist export.

    INPUT_PATH: JSON or CSV track export
    """
    tracks = _load_or_exit(input_path)

    duplicates = detect_duplicates(tracks)
    unmatched = sum(1 for t in tracks if not any(genre_vector(t.genres)))
    years = [t.release_year for t in tracks]
    top_tags = tag_distribution(tracks, limit=10)

    if format == "json":
        data = {
            "path": str(input_path),
            "total_tracks": len(tracks),
            "year_min": min(years) if years else None,
            "year_max": max(years) if years else None,
            "duplicate_groups": len(duplicates),
            "tracks_without_known_genre": unmatched,
            "top_genres": [{"genre": g, "count": c} for g, c in top_tags],
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"File: {input_path}")
    click.echo(f"Total tracks: {len(tracks)}")
    if years:
        click.echo(f"Release years: {min(years)}-{max(years)}")
    click.echo(f"Duplicate groups: {len(duplicates)}")
    click.echo(f"Tracks without a recognised genre: {unmatched}")
    if top_tags:
        click.echo("\nTop genres:")
        for genre, count in top_tags:
            click.echo(f"  {genre}: {count}")


@cli.command()
@click.argument("first", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("second", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
def compare(first: Path, second: Path, format: str) -> None:
    """
    Compare two playlist exports by track id.

    FIRST, SECOND: JSON or CSV track exports
    """
    tracks_a = _load_or_exit(first)
    tracks_b = _load_or_exit(second)

    shared = find_intersection(tracks_a, tracks_b)
    only_a = find_difference(tracks_a, tracks_b)
    only_b = find_difference(tracks_b, tracks_a)

    if format == "json":
        data = {
            "shared": [t.id for t in shared],
            "only_first": [t.id for t in only_a],
            "only_second": [t.id for t in only_b],
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Shared tracks: {len(shared)}")
    click.echo(f"Only in {first.name}: {len(only_a)}")
    for t in only_a:
        click.echo(f"  {t.artist} - {t.name}")
    click.echo(f"Only in {second.name}: {len(only_b)}")
    for t in only_b:
        click.echo(f"  {t.artist} - {t.name}")


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
