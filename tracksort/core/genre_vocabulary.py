"""
Micro-genre vocabulary used to build multi-hot genre vectors.

MICRO_GENRES is the single source of truth for genre-vector dimensionality:
the position of each entry is its index in every feature vector, so entries
must never be reordered, inserted or removed without discarding any
centroids computed against the old order.

Each entry appears exactly once, giving 54 dimensions. Earlier versions of
this list carried "lo-fi" twice (in the electronic and roots families),
for 55 dimensions in which lo-fi tags counted double both in the vector and
in label genre counts. Here "lo-fi" lives only in the electronic family and
"chill" moves up one index, so vectors or centroids built against the
55-entry layout are not interchangeable with these.

Matching is a plain case-insensitive substring test, so a broad entry fires
inside narrower tags ("french indie pop" activates "pop", "indie pop" and
"french"). Short entries such as "uk" or "rap" can also fire inside unrelated
tags ("trap" contains "rap"); that is the accepted behaviour.
"""

from collections.abc import Iterable

# ── Vocabulary ────────────────────────────────────────────────────────────────
# Grouped by family for readability; stored flat. Order is load-bearing.

GENRE_FAMILIES: dict[str, tuple[str, ...]] = {
    "pop": ("pop", "indie pop", "synth-pop", "electropop", "k-pop", "europop"),
    "rock": (
        "rock",
        "indie rock",
        "alternative",
        "punk",
        "metal",
        "hard rock",
        "grunge",
        "psychedelic",
        "post-punk",
        "new wave",
    ),
    "hip-hop": (
        "hip hop",
        "rap",
        "trap",
        "drill",
        "r&b",
        "soul",
        "neo-soul",
        "funk",
        "urban",
        "grime",
    ),
    "electronic": (
        "electronic",
        "house",
        "techno",
        "trance",
        "disco",
        "edm",
        "dubstep",
        "drum and bass",
        "ambient",
        "synthwave",
        "lo-fi",
    ),
    "global": (
        "latin",
        "reggaeton",
        "afrobeats",
        "dancehall",
        "salsa",
        "french",
        "uk",
        "german",
        "spanish",
    ),
    "roots": ("jazz", "blues", "country", "folk", "acoustic", "classical", "soundtrack", "chill"),
}

MICRO_GENRES: tuple[str, ...] = tuple(g for family in GENRE_FAMILIES.values() for g in family)

GENRE_INDEX: dict[str, int] = {g: i for i, g in enumerate(MICRO_GENRES)}


def matching_genres(tag: str) -> list[str]:
    """Return every vocabulary entry contained in ``tag``, in vocabulary order."""
    tag = tag.lower()
    return [g for g in MICRO_GENRES if g in tag]


def genre_vector(tags: Iterable[str]) -> list[int]:
    """
    Multi-hot vector over MICRO_GENRES.

    Position i is 1 when any tag contains MICRO_GENRES[i] (case-insensitive),
    otherwise 0. Duplicate tags and tag order have no effect.
    """
    vector = [0] * len(MICRO_GENRES)
    for tag in {t.lower() for t in tags}:
        for genre in matching_genres(tag):
            vector[GENRE_INDEX[genre]] = 1
    return vector


def family_of(genre: str) -> str | None:
    """Name of the family a vocabulary entry belongs to, or None if unknown."""
    for family, members in GENRE_FAMILIES.items():
        if genre in members:
            return family
    return None
