"""Pytest fixtures for performance benchmarking."""

import json
import random
from collections.abc import Callable
from pathlib import Path

import pytest

from tracksort.core.genre_vocabulary import MICRO_GENRES
from tracksort.core.track import TrackRecord

_EXTRA_TAGS = ("zydeco", "shoegaze", "bebop", "vaporwave")


@pytest.fixture(scope="module")
def synthetic_tracks() -> Callable[[int], list[TrackRecord]]:
    """
    A fixture that generates N synthetic track records with random years,
    popularity and one to three genre tags for benchmarking purposes.
    """

    def _factory(n_tracks: int, seed: int = 0) -> list[TrackRecord]:
        rng = random.Random(seed)
        tags = MICRO_GENRES + _EXTRA_TAGS
        return [
            TrackRecord(
                id=f"bench{i:017d}",
                name=f"Track_{i:05d}",
                artist=f"Artist_{rng.randint(1, 100)}",
                release_year=rng.randint(1960, 2024),
                popularity=rng.randint(0, 100),
                genres=tuple(rng.sample(tags, rng.randint(1, 3))),
            )
            for i in range(n_tracks)
        ]

    return _factory


@pytest.fixture(scope="module")
def synthetic_playlist_file(
    tmp_path_factory: pytest.TempPathFactory,
    synthetic_tracks: Callable[[int], list[TrackRecord]],
) -> Callable[[int], Path]:
    """Writes N synthetic tracks to a JSON export and returns its path."""

    def _factory(n_tracks: int) -> Path:
        base_dir = tmp_path_factory.mktemp(f"synthetic_playlist_{n_tracks}_tracks")
        path = base_dir / "playlist.json"
        tracks = [t.to_dict() for t in synthetic_tracks(n_tracks)]
        path.write_text(json.dumps({"tracks": tracks}), encoding="utf-8")
        return path

    return _factory
