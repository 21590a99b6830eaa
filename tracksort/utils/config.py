"""
User configuration management.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from tracksort.core.vectorizer import MIN_YEAR, FeatureWeights

logger = logging.getLogger(__name__)


class Config:
    """User configuration manager."""

    DEFAULT_CONFIG_PATH = Path.home() / ".config" / "tracksort" / "config.yaml"

    DEFAULT_CONFIG = {
        "year_weight": 1.0,
        "popularity_weight": 0.1,
        "genre_weight": 4.0,
        "audio_weight": 1.0,
        "min_year": MIN_YEAR,
        "vectorizer_mode": "genre-temporal",
        "tracks_per_group": 15,
        "min_groups": 4,
        "max_groups": 8,
        "max_iter": 300,
        "random_seed": None,  # int for reproducible groupings
        "log_level": "INFO",
        "default_output_dir": None,
    }

    def __init__(self, config_path: Path | None = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.config/tracksort/config.yaml)
        """
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self.config: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from file over the defaults."""
        self.config = self.DEFAULT_CONFIG.copy()
        if not self.config_path.exists():
            logger.info("No config file found, using defaults")
            return

        try:
            with open(self.config_path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config: {e}")
            return

        if not isinstance(loaded, dict):
            logger.error(f"Ignoring config {self.config_path}: expected a mapping")
            return

        self.config.update(loaded)
        logger.info(f"Loaded config from {self.config_path}")

    def save(self) -> None:
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, "w") as f:
                yaml.dump(self.config, f, default_flow_style=False)
            logger.info(f"Saved config to {self.config_path}")
        except OSError as e:
            logger.error(f"Error saving config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key
            value: Value to set
        """
        self.config[key] = value

    def get_weights(self) -> FeatureWeights:
        """
        Feature weights from config.

        Raises:
            ValueError: If a weight is negative or not a number.
        """
        return FeatureWeights(
            year=self._number("year_weight", float),
            popularity=self._number("popularity_weight", float),
            genre=self._number("genre_weight", float),
            audio=self._number("audio_weight", float),
        )

    def get_group_policy(self) -> dict[str, int]:
        """
        Keyword arguments for clustering.suggest_group_count().

        Raises:
            ValueError: If a policy value is not an integer.
        """
        return {
            "tracks_per_group": self._number("tracks_per_group", int),
            "min_groups": self._number("min_groups", int),
            "max_groups": self._number("max_groups", int),
        }

    def _number(self, key: str, kind: type) -> Any:
        value = self.get(key, self.DEFAULT_CONFIG[key])
        try:
            return kind(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Config value '{key}' must be a number, got {value!r}") from e

    def get_output_dir(self) -> Path | None:
        """
        Get default output directory from config.

        Returns:
            Path to output directory, or None
        """
        path_str = self.get("default_output_dir")
        if path_str:
            return Path(path_str).expanduser()
        return None


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """
    Get global config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
