"""
Brute-force k-nearest-neighbour search over descriptor sets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from frog_finder.services.feature_detector import DescriptorSet


@dataclass(frozen=True)
class NeighborResult:
    """Nearest neighbours of every query, closest first."""

    distances: NDArray[np.float64]
    """Euclidean distances (queries, k)."""

    indices: NDArray[np.intp]
    """Row indices into the reference set (queries, k)."""


def knn(*, reference: DescriptorSet, queries: DescriptorSet, k: int) -> NeighborResult:
    """
    Find the k nearest reference descriptors for each query descriptor.

    Args:
        reference: Descriptors searched over (the standard image)
        queries: Descriptors looked up (the target image)
        k: Neighbours per query

    Returns:
        Distances and reference indices, each of shape (queries.count, k)

    Raises:
        ValueError: If the reference set holds fewer than k descriptors
    """
    if k < 1:
        raise ValueError(f"k must be positive, got {k}")
    if reference.count < k:
        raise ValueError(
            f"Reference set has {reference.count} descriptors, need at least k={k}"
        )

    distances = np.empty((queries.count, k), dtype=np.float64)
    indices = np.empty((queries.count, k), dtype=np.intp)
    if queries.count == 0:
        return NeighborResult(distances=distances, indices=indices)

    matcher = cv2.BFMatcher(cv2.NORM_L2, crossCheck=False)
    matches = matcher.knnMatch(
        np.ascontiguousarray(queries.descriptors, dtype=np.float32),
        np.ascontiguousarray(reference.descriptors, dtype=np.float32),
        k=k,
    )

    for match_list in matches:
        for j, m in enumerate(match_list):
            distances[m.queryIdx, j] = m.distance
            indices[m.queryIdx, j] = m.trainIdx

    return NeighborResult(distances=distances, indices=indices)
