"""
Unit tests for track_loader module.
"""

import json
from pathlib import Path

import pytest

from tracksort.core.track import DEFAULT_RELEASE_YEAR, TrackRecord
from tracksort.core.track_loader import (
    TrackLoadError,
    dedupe_by_id,
    load_tracks,
    load_tracks_csv,
    load_tracks_json,
    parse_genres,
    parse_popularity,
    parse_release_year,
    parse_track_id,
)

ID_A = "4uLU6hMCjMI75M1A2tKUQC"
ID_B = "7ouMYWpwJ422jRcDASZB7P"

EXPORTIFY_HEADER = (
    "Track URI,Track Name,Artist Name(s),Album Name,Album Release Date,Popularity,Genres\n"
)


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestParseTrackId:
    def test_uri(self) -> None:
        assert parse_track_id(f"spotify:track:{ID_A}") == ID_A

    def test_url(self) -> None:
        url = f"https://open.spotify.com/track/{ID_A}?si=abc123"
        assert parse_track_id(url) == ID_A

    def test_bare_id(self) -> None:
        assert parse_track_id(f"  {ID_A} ") == ID_A

    @pytest.mark.parametrize("value", [None, "", "not an id", "spotify:album:xyz"])
    def test_invalid(self, value) -> None:
        assert parse_track_id(value) is None


class TestParseFields:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1987, 1987),
            (1987.0, 1987),
            ("1987", 1987),
            ("1987-06", 1987),
            ("1987-06-15", 1987),
            (0, DEFAULT_RELEASE_YEAR),
            ("", DEFAULT_RELEASE_YEAR),
            ("unknown", DEFAULT_RELEASE_YEAR),
            (None, DEFAULT_RELEASE_YEAR),
            (True, DEFAULT_RELEASE_YEAR),
        ],
    )
    def test_release_year(self, value, expected: int) -> None:
        assert parse_release_year(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(55, 55), ("72", 72), ("72.9", 72), (150, 100), (-3, 0), (None, 0), ("n/a", 0)],
    )
    def test_popularity(self, value, expected: int) -> None:
        assert parse_popularity(value) == expected

    def test_genres_from_delimited_string(self) -> None:
        assert parse_genres("Indie Rock, shoegaze;Rock|indie rock") == (
            "indie rock",
            "shoegaze",
            "rock",
        )

    def test_genres_from_list(self) -> None:
        assert parse_genres(["Jazz", "jazz", " bebop "]) == ("jazz", "bebop")

    def test_genres_empty(self) -> None:
        assert parse_genres(None) == ()
        assert parse_genres("") == ()


class TestLoadJson:
    def test_list_of_tracks(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "tracks.json",
            json.dumps(
                [
                    {
                        "id": ID_A,
                        "name": "Song A",
                        "artist": "Band",
                        "releaseYear": 1994,
                        "popularity": 61,
                        "genres": ["Grunge", "Rock"],
                        "previewUrl": "https://p.scdn.co/a",
                    },
                    {"uri": f"spotify:track:{ID_B}", "release_date": "2011-03-01"},
                ]
            ),
        )
        tracks = load_tracks_json(path)
        assert [t.id for t in tracks] == [ID_A, ID_B]
        assert tracks[0].release_year == 1994
        assert tracks[0].genres == ("grunge", "rock")
        assert tracks[0].preview_url == "https://p.scdn.co/a"
        assert tracks[1].release_year == 2011
        assert tracks[1].popularity == 0
        assert tracks[1].artist == "Unknown"

    def test_object_with_tracks_key(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.json", json.dumps({"name": "Mix", "tracks": [{"id": ID_A}]}))
        assert [t.id for t in load_tracks_json(path)] == [ID_A]

    def test_audio_features(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "p.json",
            json.dumps([{"id": ID_A, "audioFeatures": {"energy": 0.9, "tempo": 128}}]),
        )
        features = load_tracks_json(path)[0].audio_features
        assert features is not None
        assert features.energy == 0.9
        assert features.valence == 0.5

    def test_entries_without_id_skipped(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.json", json.dumps([{"name": "no id"}, "junk", {"id": ID_A}]))
        assert [t.id for t in load_tracks_json(path)] == [ID_A]

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.json", "{not json")
        with pytest.raises(TrackLoadError):
            load_tracks_json(path)

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "p.json"
        path.write_bytes(b'[{"id": "a", "name": "\xff\xfe"}]')
        with pytest.raises(TrackLoadError, match="Cannot read"):
            load_tracks_json(path)

    def test_non_iterable_genres(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.json", json.dumps([{"id": ID_A, "genres": 5}]))
        with pytest.raises(TrackLoadError, match="entry 0"):
            load_tracks_json(path)

    def test_non_numeric_audio_feature(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "p.json",
            json.dumps([{"id": ID_A}, {"id": ID_B, "audio_features": {"energy": "high"}}]),
        )
        with pytest.raises(TrackLoadError, match="entry 1"):
            load_tracks(path)

    def test_wrong_shape(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.json", json.dumps({"items": []}))
        with pytest.raises(TrackLoadError, match="tracks"):
            load_tracks_json(path)


class TestLoadCsv:
    def test_exportify_columns(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "p.csv",
            EXPORTIFY_HEADER
            + f'spotify:track:{ID_A},Song A,Band,Album,1994-05-01,61,"grunge,rock"\n'
            + f"spotify:track:{ID_B},Song B,,,,,\n",
        )
        tracks = load_tracks_csv(path)
        assert [t.id for t in tracks] == [ID_A, ID_B]
        first, second = tracks
        assert (first.name, first.artist, first.album) == ("Song A", "Band", "Album")
        assert first.release_year == 1994
        assert first.popularity == 61
        assert first.genres == ("grunge", "rock")
        assert second.release_year == DEFAULT_RELEASE_YEAR
        assert second.popularity == 0
        assert second.genres == ()
        assert second.artist == "Unknown"

    def test_url_column_and_loose_headers(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "p.csv",
            "Title,Artist,Spotify URL,Year\n"
            + f"Song A,Band,https://open.spotify.com/track/{ID_A},1979\n",
        )
        track = load_tracks_csv(path)[0]
        assert track.id == ID_A
        assert track.name == "Song A"
        assert track.release_year == 1979

    def test_byte_order_mark(self, tmp_path: Path) -> None:
        path = tmp_path / "p.csv"
        path.write_bytes(("\ufeff" + EXPORTIFY_HEADER + f"{ID_A},Song,Band,,,,\n").encode())
        assert load_tracks_csv(path)[0].id == ID_A

    def test_rows_without_id_skipped(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "p.csv",
            EXPORTIFY_HEADER + "garbage,Song,Band,,,,\n" + f"{ID_B},Song,Band,,,,\n",
        )
        assert [t.id for t in load_tracks_csv(path)] == [ID_B]

    def test_header_only(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.csv", EXPORTIFY_HEADER)
        with pytest.raises(TrackLoadError, match="header"):
            load_tracks_csv(path)

    def test_no_id_column(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.csv", "Name,Artist\nSong,Band\n")
        with pytest.raises(TrackLoadError, match="column"):
            load_tracks_csv(path)


class TestLoadTracks:
    def test_dispatch_and_dedupe(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "p.json",
            json.dumps([{"id": ID_A, "name": "first"}, {"id": ID_A, "name": "second"}]),
        )
        tracks = load_tracks(path)
        assert len(tracks) == 1
        assert tracks[0].name == "first"

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = write(tmp_path, "p.xml", "<tracks/>")
        with pytest.raises(TrackLoadError, match="Unsupported"):
            load_tracks(path)

    def test_suffix_case_insensitive(self, tmp_path: Path) -> None:
        path = write(tmp_path, "P.JSON", json.dumps([{"id": ID_A}]))
        assert len(load_tracks(path)) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TrackLoadError):
            load_tracks(tmp_path / "missing.csv")

    def test_dedupe_by_id_keeps_order(self) -> None:
        tracks = [TrackRecord(id="b"), TrackRecord(id="a"), TrackRecord(id="b", name="x")]
        assert [(t.id, t.name) for t in dedupe_by_id(tracks)] == [("b", ""), ("a", "")]
