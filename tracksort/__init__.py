"""tracksort - group playlist tracks into labeled genre/era clusters."""

__version__ = "0.1.0"
