"""
Feature vectorization for track clustering.

Two strategies share one contract (``vectorize(track) -> np.ndarray``):

  - genre-temporal (default): [year, popularity, genre_0 ... genre_(M-1)]
    with a multi-hot genre block over MICRO_GENRES.
  - audio-features: [year, popularity, 7 acoustic descriptors, tempo],
    falling back to AudioFeatures.default() when a track has none.

Weights are deliberately unequal. With the defaults one differing genre
dimension contributes 4.0 to the Euclidean distance while the whole year
window contributes at most 1.0, so genre dominates, era is secondary and
popularity only separates hits from obscure tracks inside the same bucket.
"""

import datetime
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from tracksort.core.genre_vocabulary import MICRO_GENRES, genre_vector
from tracksort.core.track import AudioFeatures, TrackRecord

logger = logging.getLogger(__name__)

MIN_YEAR: int = 1960

# Tempo window used to rescale BPM into [0, 1] for the audio strategy.
_TEMPO_MIN: float = 50.0
_TEMPO_MAX: float = 200.0

_AUDIO_FEATURE_NAMES: tuple[str, ...] = (
    "acousticness",
    "danceability",
    "energy",
    "instrumentalness",
    "liveness",
    "speechiness",
    "valence",
    "tempo",
)

_VECTORIZER_GENRE_TEMPORAL = "genre-temporal"
_VECTORIZER_AUDIO = "audio-features"
VECTORIZER_MODES: tuple[str, ...] = (_VECTORIZER_GENRE_TEMPORAL, _VECTORIZER_AUDIO)


@dataclass(frozen=True)
class FeatureWeights:
    """Per-block multipliers applied after each feature is rescaled to [0, 1]."""

    year: float = 1.0
    popularity: float = 0.1
    genre: float = 4.0  # per activated genre dimension
    audio: float = 1.0  # audio-features strategy only

    def __post_init__(self) -> None:
        for name in ("year", "popularity", "genre", "audio"):
            if getattr(self, name) < 0:
                raise ValueError(f"Weight '{name}' must be non-negative")


def normalize_year(year: int, min_year: int = MIN_YEAR, max_year: int | None = None) -> float:
    """
    Clamp ``year`` to [min_year, max_year] and rescale to [0, 1].

    max_year defaults to the current calendar year. A zero-width window maps
    every year to 0.0.
    """
    if max_year is None:
        max_year = datetime.date.today().year
    span = max_year - min_year
    if span <= 0:
        return 0.0
    clamped = max(min_year, min(year, max_year))
    return (clamped - min_year) / span


def normalize_popularity(popularity: int) -> float:
    return popularity / 100


class GenreTemporalVectorizer:
    """Maps tracks to [year, popularity, multi-hot genres]."""

    mode = _VECTORIZER_GENRE_TEMPORAL

    def __init__(
        self,
        weights: FeatureWeights | None = None,
        min_year: int = MIN_YEAR,
        max_year: int | None = None,
    ):
        """
        Initialize vectorizer.

        Args:
            weights: Block weights (default: year 1.0, popularity 0.1, genre 4.0)
            min_year: Lower edge of the temporal window
            max_year: Upper edge of the temporal window (default: current year)
        """
        self.weights = weights or FeatureWeights()
        self.min_year = min_year
        self.max_year = max_year if max_year is not None else datetime.date.today().year

    @property
    def dimensions(self) -> int:
        return 2 + len(MICRO_GENRES)

    @property
    def feature_names(self) -> tuple[str, ...]:
        return ("year", "popularity", *(f"genre:{g}" for g in MICRO_GENRES))

    def vectorize(self, track: TrackRecord) -> np.ndarray:
        """Build the feature vector for a single track."""
        year_feat = normalize_year(track.release_year, self.min_year, self.max_year)
        pop_feat = normalize_popularity(track.popularity)
        genres = np.asarray(genre_vector(track.genres), dtype=float)
        return np.concatenate(
            [
                [year_feat * self.weights.year, pop_feat * self.weights.popularity],
                genres * self.weights.genre,
            ]
        )

    def vectorize_all(self, tracks: Sequence[TrackRecord]) -> np.ndarray:
        """Stack vectors for all tracks into an (N, D) matrix."""
        if not tracks:
            return np.empty((0, self.dimensions))
        return np.vstack([self.vectorize(t) for t in tracks])


class AudioFeatureVectorizer:
    """
    Maps tracks to [year, popularity, acoustic descriptors, tempo].

    Tracks without audio features use AudioFeatures.default(), so they sit in
    the middle of the acoustic space rather than being dropped.
    """

    mode = _VECTORIZER_AUDIO

    def __init__(
        self,
        weights: FeatureWeights | None = None,
        min_year: int = MIN_YEAR,
        max_year: int | None = None,
    ):
        self.weights = weights or FeatureWeights()
        self.min_year = min_year
        self.max_year = max_year if max_year is not None else datetime.date.today().year

    @property
    def dimensions(self) -> int:
        return 2 + len(_AUDIO_FEATURE_NAMES)

    @property
    def feature_names(self) -> tuple[str, ...]:
        return ("year", "popularity", *_AUDIO_FEATURE_NAMES)

    def vectorize(self, track: TrackRecord) -> np.ndarray:
        features = track.audio_features or AudioFeatures.default()
        tempo = max(_TEMPO_MIN, min(features.tempo, _TEMPO_MAX))
        audio = np.array(
            [
                features.acousticness,
                features.danceability,
                features.energy,
                features.instrumentalness,
                features.liveness,
                features.speechiness,
                features.valence,
                (tempo - _TEMPO_MIN) / (_TEMPO_MAX - _TEMPO_MIN),
            ]
        )
        year_feat = normalize_year(track.release_year, self.min_year, self.max_year)
        pop_feat = normalize_popularity(track.popularity)
        return np.concatenate(
            [
                [year_feat * self.weights.year, pop_feat * self.weights.popularity],
                audio * self.weights.audio,
            ]
        )

    def vectorize_all(self, tracks: Sequence[TrackRecord]) -> np.ndarray:
        if not tracks:
            return np.empty((0, self.dimensions))
        missing = sum(1 for t in tracks if t.audio_features is None)
        if missing:
            logger.warning(f"{missing}/{len(tracks)} tracks lack audio features; using defaults")
        return np.vstack([self.vectorize(t) for t in tracks])


Vectorizer = GenreTemporalVectorizer | AudioFeatureVectorizer


def get_vectorizer(
    mode: str = _VECTORIZER_GENRE_TEMPORAL,
    weights: FeatureWeights | None = None,
    min_year: int = MIN_YEAR,
    max_year: int | None = None,
) -> Vectorizer:
    """
    Return the vectorizer strategy named by ``mode``.

    Raises:
        ValueError: If mode is not one of VECTORIZER_MODES.
    """
    if mode == _VECTORIZER_GENRE_TEMPORAL:
        return GenreTemporalVectorizer(weights, min_year=min_year, max_year=max_year)
    if mode == _VECTORIZER_AUDIO:
        return AudioFeatureVectorizer(weights, min_year=min_year, max_year=max_year)
    raise ValueError(f"Unknown vectorizer mode '{mode}'; expected one of {VECTORIZER_MODES}")
