"""
Loading track records from local playlist exports.

Supported inputs:
  - JSON: a list of track objects, or an object with a "tracks" list.
    Keys follow TrackRecord.to_dict(); camelCase variants (releaseYear,
    previewUrl, artistIds) and a "release_date" string are also accepted.
  - CSV: one row per track with a header row. Columns are found by name
    (Exportify-style "Track URI", "Track Name", "Artist Name(s)",
    "Album Name", "Album Release Date", "Popularity", "Genres", ...).

Every record leaves this module fully defaulted: unparsable or missing year
-> DEFAULT_RELEASE_YEAR, missing popularity -> 0 (clamped to 0-100), missing
genres -> empty. Duplicate ids are dropped, first occurrence wins.
"""

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any

from tracksort.core.track import DEFAULT_RELEASE_YEAR, AudioFeatures, TrackRecord

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: tuple[str, ...] = (".json", ".csv")

_TRACK_URI_PREFIX = "spotify:track:"
_TRACK_URL_RE = re.compile(r"track/([a-zA-Z0-9]{22})")
_BARE_ID_RE = re.compile(r"^[a-zA-Z0-9]{22}$")
_YEAR_RE = re.compile(r"^\s*(\d{4})")
_GENRE_SPLIT_RE = re.compile(r"[;,|]")

# Header aliases per field, most specific first. Exact matches win over
# substring matches.
_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("track uri", "spotify uri", "spotify id", "track id", "uri", "id"),
    "url": ("track url", "spotify url", "url"),
    "name": ("track name", "name", "title"),
    "artist": ("artist name(s)", "artist name", "artists", "artist"),
    "album": ("album name", "album"),
    "release_date": ("album release date", "release date", "release_date", "year"),
    "popularity": ("popularity",),
    "genres": ("genres", "artist genres", "genre"),
    "image": ("album image url", "image"),
    "preview_url": ("track preview url", "preview url", "preview_url"),
}


class TrackLoadError(ValueError):
    """Raised when a track export cannot be read."""


# ── Field parsing ─────────────────────────────────────────────────────────────


def parse_track_id(value: str | None) -> str | None:
    """
    Extract a track id from a URI, an open.spotify.com URL or a bare id.

    Returns:
        The 22-character id, or None when ``value`` holds none of these
    """
    if not value:
        return None
    value = value.strip()
    if value.startswith(_TRACK_URI_PREFIX):
        return value[len(_TRACK_URI_PREFIX) :] or None
    if _BARE_ID_RE.match(value):
        return value
    match = _TRACK_URL_RE.search(value)
    if match:
        return match.group(1)
    return None


def parse_release_year(value: Any) -> int:
    """
    Year from an int or a "YYYY", "YYYY-MM" or "YYYY-MM-DD" string.

    Anything else (including 0) becomes DEFAULT_RELEASE_YEAR.
    """
    if isinstance(value, bool):
        return DEFAULT_RELEASE_YEAR
    if isinstance(value, int):
        return value or DEFAULT_RELEASE_YEAR
    if isinstance(value, float) and value.is_integer():
        return int(value) or DEFAULT_RELEASE_YEAR
    if isinstance(value, str):
        match = _YEAR_RE.match(value)
        if match:
            return int(match.group(1)) or DEFAULT_RELEASE_YEAR
    return DEFAULT_RELEASE_YEAR


def parse_popularity(value: Any) -> int:
    """Integer popularity clamped to 0-100; unparsable values become 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        popularity = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, min(popularity, 100))


def parse_genres(value: Any) -> tuple[str, ...]:
    """Lowercased, de-duplicated genre tags from a list or a delimited string."""
    if not value:
        return ()
    if isinstance(value, str):
        raw = _GENRE_SPLIT_RE.split(value)
    else:
        raw = [str(v) for v in value]
    return tuple(dict.fromkeys(g.strip().lower() for g in raw if g and g.strip()))


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) not in (None, ""):
            return data[key]
    return None


def _record_from_mapping(data: dict[str, Any]) -> TrackRecord | None:
    track_id = _first(data, "id", "uri")
    if track_id is None:
        return None
    track_id = str(track_id)
    if track_id.startswith(_TRACK_URI_PREFIX):
        track_id = track_id[len(_TRACK_URI_PREFIX) :]

    year_raw = _first(data, "release_year", "releaseYear", "release_date", "year")
    audio = _first(data, "audio_features", "audioFeatures")
    return TrackRecord(
        id=track_id,
        name=str(_first(data, "name", "title") or ""),
        artist=str(_first(data, "artist") or "Unknown"),
        album=str(_first(data, "album") or ""),
        release_year=parse_release_year(year_raw),
        popularity=parse_popularity(data.get("popularity")),
        genres=parse_genres(data.get("genres")),
        artist_ids=tuple(str(a) for a in _first(data, "artist_ids", "artistIds") or ()),
        image=_first(data, "image"),
        preview_url=_first(data, "preview_url", "previewUrl"),
        audio_features=AudioFeatures.from_dict(audio) if isinstance(audio, dict) else None,
    )


# ── Loaders ───────────────────────────────────────────────────────────────────


def _find_column(headers: list[str], aliases: tuple[str, ...]) -> int | None:
    lowered = [h.strip().lower() for h in headers]
    for alias in aliases:
        if alias in lowered:
            return lowered.index(alias)
    for alias in aliases:
        for i, header in enumerate(lowered):
            if alias in header:
                return i
    return None


def load_tracks_json(path: Path) -> list[TrackRecord]:
    """Load tracks from a JSON export."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise TrackLoadError(f"Cannot read {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("tracks")
    if not isinstance(data, list):
        raise TrackLoadError(f"{path}: expected a list of tracks or an object with 'tracks'")

    tracks: list[TrackRecord] = []
    skipped = 0
    for position, item in enumerate(data):
        try:
            record = _record_from_mapping(item) if isinstance(item, dict) else None
        except (TypeError, ValueError) as exc:
            raise TrackLoadError(f"{path}: malformed track entry {position}: {exc}") from exc
        if record is None:
            skipped += 1
            continue
        tracks.append(record)

    if skipped:
        logger.warning(f"Skipped {skipped} entries without a track id in {path.name}")
    return tracks


def load_tracks_csv(path: Path) -> list[TrackRecord]:
    """Load tracks from a CSV export with a header row."""
    try:
        with open(path, encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise TrackLoadError(f"Cannot read {path}: {exc}") from exc

    rows = [r for r in rows if any(cell.strip() for cell in r)]
    if len(rows) < 2:
        raise TrackLoadError(f"{path}: CSV must contain a header and at least one track row")

    headers = rows[0]
    columns = {field: _find_column(headers, aliases) for field, aliases in _COLUMN_ALIASES.items()}
    if columns["id"] is None and columns["url"] is None:
        raise TrackLoadError(f"{path}: no track id, URI or URL column found")
    logger.debug(f"CSV column mapping for {path.name}: {columns}")

    def cell(row: list[str], field: str) -> str | None:
        index = columns[field]
        if index is None or index >= len(row):
            return None
        return row[index].strip() or None

    tracks: list[TrackRecord] = []
    skipped = 0
    for row in rows[1:]:
        track_id = parse_track_id(cell(row, "id")) or parse_track_id(cell(row, "url"))
        if track_id is None:
            skipped += 1
            continue
        tracks.append(
            TrackRecord(
                id=track_id,
                name=cell(row, "name") or "",
                artist=cell(row, "artist") or "Unknown",
                album=cell(row, "album") or "",
                release_year=parse_release_year(cell(row, "release_date")),
                popularity=parse_popularity(cell(row, "popularity")),
                genres=parse_genres(cell(row, "genres")),
                image=cell(row, "image"),
                preview_url=cell(row, "preview_url"),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} rows without a valid track id in {path.name}")
    return tracks


def dedupe_by_id(tracks: list[TrackRecord]) -> list[TrackRecord]:
    """Drop repeated track ids, keeping the first occurrence."""
    seen: dict[str, TrackRecord] = {}
    for track in tracks:
        seen.setdefault(track.id, track)
    if len(seen) < len(tracks):
        logger.info(f"Dropped {len(tracks) - len(seen)} repeated track ids")
    return list(seen.values())


def load_tracks(path: Path) -> list[TrackRecord]:
    """
    Load, default and de-duplicate tracks from a JSON or CSV export.

    Raises:
        TrackLoadError: For unreadable files or unsupported formats.
    """
    suffix = path.suffix.lower()
    if suffix == ".json":
        tracks = load_tracks_json(path)
    elif suffix == ".csv":
        tracks = load_tracks_csv(path)
    else:
        raise TrackLoadError(
            f"Unsupported track file format '{suffix}'; expected one of {SUPPORTED_FORMATS}"
        )

    tracks = dedupe_by_id(tracks)
    logger.info(f"Loaded {len(tracks)} tracks from {path}")
    return tracks
