"""
K-means clustering with k-means++ seeding.

Seeding is the only random step and is delegated to scikit-learn's greedy
k-means++ (``kmeans_plusplus``), which accepts an explicit ``random_state``.
The Lloyd iteration that follows is deterministic:

  repeat:
    assign every point to its nearest centroid (squared Euclidean; ties go to
    the lower centroid index because np.argmin returns the first minimum)
    move every centroid to the mean of its points
  until assignments stop changing or max_iter is reached

A centroid that loses all of its points stays where it was. Empty clusters are
reported as such; nothing here invents members for them.
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
from sklearn.cluster import kmeans_plusplus
from sklearn.metrics.pairwise import euclidean_distances

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER: int = 300


@dataclass
class KMeansResult:
    """Hard assignment of each input vector to one of ``effective_k`` centroids."""

    labels: np.ndarray  # shape (n,), ints in [0, effective_k)
    centroids: np.ndarray  # shape (effective_k, n_features)
    n_iter: int
    converged: bool

    @property
    def effective_k(self) -> int:
        return len(self.centroids)

    def members(self) -> list[list[int]]:
        """Member indices for every centroid index, empty lists included."""
        groups: list[list[int]] = [[] for _ in range(self.effective_k)]
        for index, label in enumerate(self.labels):
            groups[int(label)].append(index)
        return groups


def _validate_k(k: int) -> None:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise ValueError(f"k must be an integer, got {k!r}")
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")


def _validate_vectors(vectors: np.ndarray) -> None:
    if vectors.ndim != 2:
        raise ValueError(f"Expected a 2D (n_tracks, n_features) array, got shape {vectors.shape}")
    if not np.all(np.isfinite(vectors)):
        raise ValueError("Feature vectors contain NaN or infinite values")


def _assign(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    dists = euclidean_distances(vectors, centroids, squared=True)
    return np.argmin(dists, axis=1)


def _update_centroids(vectors: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    updated = centroids.copy()
    for k in range(len(centroids)):
        mask = labels == k
        if mask.any():
            updated[k] = vectors[mask].mean(axis=0)
    return updated


def kmeans(
    vectors: np.ndarray | list[list[float]],
    k: int,
    seed: int | np.random.RandomState | None = None,
    max_iter: int = DEFAULT_MAX_ITER,
    time_budget: float | None = None,
) -> KMeansResult:
    """
    Partition ``vectors`` into at most ``k`` groups.

    Args:
        vectors: Feature matrix, shape (n_tracks, n_features)
        k: Requested number of clusters; clamped to n_tracks
        seed: Seed for k-means++ initialization (None = non-reproducible)
        max_iter: Cap on Lloyd iterations
        time_budget: Optional wall-clock limit in seconds for the Lloyd loop

    Returns:
        KMeansResult with one centroid per effective cluster index

    Raises:
        ValueError: If k is not a positive integer or vectors are malformed.
    """
    _validate_k(k)
    X = np.asarray(vectors, dtype=float)
    if len(X) == 0:
        n_features = X.shape[1] if X.ndim == 2 else 0
        return KMeansResult(
            labels=np.empty(0, dtype=int),
            centroids=np.empty((0, n_features)),
            n_iter=0,
            converged=True,
        )

    _validate_vectors(X)
    n_points = len(X)
    effective_k = min(int(k), n_points)
    if effective_k < k:
        logger.debug(f"Requested k={k} exceeds {n_points} points; using k={effective_k}")

    if effective_k == 1:
        return KMeansResult(
            labels=np.zeros(n_points, dtype=int),
            centroids=X.mean(axis=0, keepdims=True),
            n_iter=1,
            converged=True,
        )

    centroids, seed_indices = kmeans_plusplus(X, n_clusters=effective_k, random_state=seed)
    logger.debug(f"k-means++ seeds: {seed_indices.tolist()}")

    labels = _assign(X, centroids)
    converged = False
    n_iter = 0
    started = time.monotonic()

    while n_iter < max_iter:
        n_iter += 1
        centroids = _update_centroids(X, labels, centroids)
        new_labels = _assign(X, centroids)
        if np.array_equal(new_labels, labels):
            converged = True
            break
        labels = new_labels
        if time_budget is not None and time.monotonic() - started > time_budget:
            logger.warning(
                f"K-means stopped after {n_iter} iterations: time budget {time_budget}s exceeded"
            )
            break

    if converged:
        logger.debug(f"K-means converged after {n_iter} iterations")
    elif n_iter >= max_iter:
        logger.warning(f"K-means hit the iteration cap ({max_iter}) before converging")

    # Centroids always reflect the returned labels.
    centroids = _update_centroids(X, labels, centroids)

    return KMeansResult(labels=labels, centroids=centroids, n_iter=n_iter, converged=converged)
