"""
Unit tests for config module.
"""

from pathlib import Path

import pytest
import yaml

from tracksort.core.vectorizer import FeatureWeights
from tracksort.utils.config import Config


class TestConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = Config(tmp_path / "missing.yaml")
        assert config.get("genre_weight") == 4.0
        assert config.get("vectorizer_mode") == "genre-temporal"
        assert config.get("random_seed") is None

    def test_file_overrides_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"genre_weight": 2.5, "random_seed": 42}))
        config = Config(path)
        assert config.get("genre_weight") == 2.5
        assert config.get("random_seed") == 42
        assert config.get("year_weight") == 1.0

    def test_invalid_yaml_keeps_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("genre_weight: [unclosed\n")
        assert Config(path).get("genre_weight") == 4.0

    def test_non_mapping_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        assert Config(path).get("max_groups") == 8

    def test_save_and_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        config = Config(path)
        config.set("max_groups", 12)
        config.save()
        assert path.exists()
        assert Config(path).get("max_groups") == 12

    def test_get_with_default(self, tmp_path: Path) -> None:
        assert Config(tmp_path / "none.yaml").get("no_such_key", "fallback") == "fallback"


class TestDerivedSettings:
    def test_weights(self, tmp_path: Path) -> None:
        config = Config(tmp_path / "none.yaml")
        config.set("genre_weight", 3)
        assert config.get_weights() == FeatureWeights(year=1.0, popularity=0.1, genre=3.0)

    def test_negative_weight_rejected(self, tmp_path: Path) -> None:
        config = Config(tmp_path / "none.yaml")
        config.set("year_weight", -1)
        with pytest.raises(ValueError):
            config.get_weights()

    def test_group_policy(self, tmp_path: Path) -> None:
        config = Config(tmp_path / "none.yaml")
        assert config.get_group_policy() == {
            "tracks_per_group": 15,
            "min_groups": 4,
            "max_groups": 8,
        }

    @pytest.mark.parametrize("key", ["year_weight", "genre_weight", "audio_weight"])
    def test_null_weight_names_key(self, tmp_path: Path, key: str) -> None:
        config = Config(tmp_path / "none.yaml")
        config.set(key, None)
        with pytest.raises(ValueError, match=key):
            config.get_weights()

    def test_non_numeric_weight_names_key(self, tmp_path: Path) -> None:
        config = Config(tmp_path / "none.yaml")
        config.set("popularity_weight", "lots")
        with pytest.raises(ValueError, match="popularity_weight"):
            config.get_weights()

    @pytest.mark.parametrize("key", ["tracks_per_group", "min_groups", "max_groups"])
    def test_null_group_policy_names_key(self, tmp_path: Path, key: str) -> None:
        config = Config(tmp_path / "none.yaml")
        config.set(key, None)
        with pytest.raises(ValueError, match=key):
            config.get_group_policy()

    def test_output_dir(self, tmp_path: Path) -> None:
        config = Config(tmp_path / "none.yaml")
        assert config.get_output_dir() is None
        config.set("default_output_dir", str(tmp_path / "out"))
        assert config.get_output_dir() == tmp_path / "out"
