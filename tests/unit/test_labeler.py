"""
Unit tests for labeler module.
"""

import pytest

from tracksort.core.labeler import (
    FALLBACK_LABEL,
    compose_label,
    decade_of,
    dominant_genres,
    label_cluster,
    mean_year,
)
from tracksort.core.track import TrackRecord

# ── Helpers ────────────────────────────────────────────────────────────────────


def make_tracks(genres: tuple[str, ...], years: list[int]) -> list[TrackRecord]:
    return [
        TrackRecord(id=f"t{i}", name=f"Song {i}", release_year=y, genres=genres)
        for i, y in enumerate(years)
    ]


class TestDecade:
    def test_mean_year(self) -> None:
        tracks = make_tracks((), [1990, 1994, 1999])
        assert mean_year(tracks) == pytest.approx(1994.333, abs=1e-3)

    def test_decade_floors_mean(self) -> None:
        assert decade_of(make_tracks((), [1990, 1994, 1999])) == 1990

    def test_decade_boundary(self) -> None:
        assert decade_of(make_tracks((), [1999, 2001])) == 2000

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            mean_year([])


class TestDominantGenres:
    def test_counts_every_tag(self) -> None:
        tracks = make_tracks(("rock",), [1970] * 3) + make_tracks(("jazz",), [1970] * 2)
        assert dominant_genres(tracks) == [("rock", 3), ("jazz", 2)]

    def test_limit(self) -> None:
        tracks = make_tracks(("rock", "jazz", "blues"), [1970])
        assert len(dominant_genres(tracks, limit=3)) == 3
        assert len(dominant_genres(tracks, limit=1)) == 1

    def test_unknown_tags_ignored(self) -> None:
        assert dominant_genres(make_tracks(("zydeco",), [1990])) == []

    def test_tie_prefers_more_specific_entry(self) -> None:
        top = dominant_genres(make_tracks(("synth-pop",), [2012] * 4))
        assert [g for g, _ in top] == ["synth-pop", "pop"]

    def test_tie_then_vocabulary_order(self) -> None:
        tracks = make_tracks(("jazz",), [1960]) + make_tracks(("folk",), [1960])
        assert [g for g, _ in dominant_genres(tracks)] == ["jazz", "folk"]


class TestComposeLabel:
    def test_two_genres(self) -> None:
        assert compose_label("rock", "jazz", 1970) == "Rock & Jazz 1970s"

    def test_substring_secondary_dropped(self) -> None:
        assert compose_label("rock", "indie rock", 1990) == "Rock 1990s"
        assert compose_label("indie rock", "rock", 1990) == "Indie rock 1990s"

    def test_same_secondary_dropped(self) -> None:
        assert compose_label("pop", "pop", 2010) == "Pop 2010s"

    def test_no_secondary(self) -> None:
        assert compose_label("jazz", None, 1950) == "Jazz 1950s"

    def test_fallback(self) -> None:
        assert compose_label(None, None, 2000) == f"{FALLBACK_LABEL} 2000s"

    def test_only_first_letter_capitalized(self) -> None:
        assert compose_label("hip hop", "r&b", 2000) == "Hip hop & R&b 2000s"


class TestLabelCluster:
    def test_rock_and_jazz(self) -> None:
        tracks = make_tracks(("rock",), [1970, 1971, 1972]) + make_tracks(
            ("jazz",), [1973, 1974]
        )
        assert label_cluster(tracks) == "Rock & Jazz 1970s"

    def test_rock_with_indie_rock(self) -> None:
        tracks = make_tracks(("rock",), [1990, 1991, 1992]) + make_tracks(
            ("indie rock",), [1995]
        )
        assert label_cluster(tracks) == "Rock 1990s"

    def test_synth_pop(self) -> None:
        tracks = make_tracks(("synth-pop",), [2010, 2012, 2014, 2016])
        assert label_cluster(tracks) == "Synth-pop 2010s"

    def test_no_genres_falls_back(self) -> None:
        assert label_cluster(make_tracks((), [1993])) == "Mix 1990s"

    def test_unknown_genres_fall_back(self) -> None:
        assert label_cluster(make_tracks(("zydeco",), [1996])) == "Mix 1990s"

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            label_cluster([])
