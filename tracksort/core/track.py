"""
Track records handed to the grouping engine.

A TrackRecord is produced by an ingestion adapter (see track_loader) with all
defaults already applied: missing year -> DEFAULT_RELEASE_YEAR, missing
popularity -> 0, missing genres -> empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Sentinel year substituted upstream when a release date is missing or unparsable.
DEFAULT_RELEASE_YEAR: int = 2000


@dataclass(frozen=True)
class AudioFeatures:
    """Acoustic descriptors for a track (all in [0, 1] except tempo in BPM)."""

    acousticness: float = 0.5
    danceability: float = 0.5
    energy: float = 0.5
    instrumentalness: float = 0.0
    liveness: float = 0.5
    speechiness: float = 0.5
    valence: float = 0.5
    tempo: float = 120.0

    @classmethod
    def default(cls) -> AudioFeatures:
        """Fallback values used when the catalog cannot supply features."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AudioFeatures:
        """Build from a mapping, filling absent keys with the fallback values."""
        defaults = cls.default()
        values: dict[str, float] = {}
        for name in cls.__dataclass_fields__:
            raw = data.get(name)
            values[name] = float(raw) if raw is not None else getattr(defaults, name)
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


@dataclass(frozen=True)
class TrackRecord:
    """Container for the metadata of one track."""

    id: str
    name: str = ""
    artist: str = "Unknown"
    album: str = ""
    release_year: int = DEFAULT_RELEASE_YEAR
    popularity: int = 0  # 0-100
    genres: tuple[str, ...] = field(default_factory=tuple)  # lowercase tags
    artist_ids: tuple[str, ...] = field(default_factory=tuple)
    image: str | None = None
    preview_url: str | None = None
    audio_features: AudioFeatures | None = None

    def validate(self) -> None:
        """
        Check the fields the engine computes with.

        Raises:
            ValueError: If the year is not an integer or popularity is outside 0-100.
        """
        if isinstance(self.release_year, bool) or not isinstance(self.release_year, int):
            raise ValueError(
                f"Track {self.id!r}: release_year must be an int, got {self.release_year!r}"
            )
        if isinstance(self.popularity, bool) or not isinstance(self.popularity, int):
            raise ValueError(
                f"Track {self.id!r}: popularity must be an int, got {self.popularity!r}"
            )
        if not 0 <= self.popularity <= 100:
            raise ValueError(
                f"Track {self.id!r}: popularity must be within 0-100, got {self.popularity}"
            )
        if isinstance(self.genres, str):
            raise ValueError(f"Track {self.id!r}: genres must be a collection of tags, not a str")

    def to_dict(self) -> dict[str, Any]:
        """Convert the record to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "artist": self.artist,
            "album": self.album,
            "release_year": self.release_year,
            "popularity": self.popularity,
            "genres": list(self.genres),
            "artist_ids": list(self.artist_ids),
            "image": self.image,
            "preview_url": self.preview_url,
            "audio_features": self.audio_features.to_dict() if self.audio_features else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrackRecord:
        """
        Inverse of to_dict().

        Only ``id`` is required; the rest falls back to the dataclass defaults.
        Genre tags are lowercased and de-duplicated, keeping first-seen order.
        """
        genres = tuple(dict.fromkeys(g.strip().lower() for g in data.get("genres") or () if g))
        audio = data.get("audio_features")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            artist=data.get("artist") or "Unknown",
            album=data.get("album") or "",
            release_year=data.get("release_year", DEFAULT_RELEASE_YEAR),
            popularity=data.get("popularity", 0),
            genres=genres,
            artist_ids=tuple(data.get("artist_ids") or ()),
            image=data.get("image"),
            preview_url=data.get("preview_url"),
            audio_features=AudioFeatures.from_dict(audio) if audio else None,
        )
