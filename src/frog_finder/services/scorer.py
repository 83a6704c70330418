"""
Pairwise match quality between a target and a standard image.

Following Lowe 2004:

1. Detect local features in both images.
2. For every target feature find the two closest standard features.
3. Keep the target features whose closest standard feature is much closer
   than the second closest (the ratio test).
4. The proportion of kept target features is the match quality.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from frog_finder.logging import get_logger
from frog_finder.models import ComputedQuality, MatchOutcome, NotComputable
from frog_finder.services.knn import knn
from frog_finder.services.ratio_test import good_match_proportion

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from frog_finder.config import DetectorConfig
    from frog_finder.services.feature_detector import DescriptorSet, FeatureDetector

# Two neighbours are needed for a nearest vs runner-up comparison
MIN_DESCRIPTORS = 2
NEIGHBOURS = 2

logger = get_logger("scorer")


class PairwiseMatchScorer:
    """Score one target image against one standard image."""

    def __init__(
        self,
        detector: FeatureDetector,
        max_points: int,
        target_threshold: float,
        standard_threshold: float,
    ) -> None:
        """
        Initialize scorer.

        Args:
            detector: Feature detector used for both images
            max_points: Detection budget per image
            target_threshold: Detection threshold for target images
            standard_threshold: Relaxed detection threshold for standards
        """
        self.detector = detector
        self.max_points = max_points
        self.target_threshold = target_threshold
        self.standard_threshold = standard_threshold

    @classmethod
    def from_config(cls, detector: FeatureDetector, config: DetectorConfig) -> PairwiseMatchScorer:
        return cls(
            detector=detector,
            max_points=config.max_points,
            target_threshold=config.target_threshold,
            standard_threshold=config.standard_threshold,
        )

    def score(
        self,
        target_image: NDArray[np.uint8],
        standard_image: NDArray[np.uint8],
        ratio: float,
    ) -> MatchOutcome:
        """
        Detect features in both images and score the pair.

        Args:
            target_image: Grayscale target pixels
            standard_image: Grayscale standard pixels
            ratio: Lowe ratio in (0, 1]

        Returns:
            ComputedQuality in [0, 1], or NotComputable when either image
            yields fewer than two descriptors
        """
        target_set = self.detector.detect(target_image, self.max_points, self.target_threshold)
        standard_set = self.detector.detect(
            standard_image, self.max_points, self.standard_threshold
        )
        return self.score_descriptors(target_set, standard_set, ratio)

    def score_descriptors(
        self,
        target_set: DescriptorSet,
        standard_set: DescriptorSet,
        ratio: float,
    ) -> MatchOutcome:
        """Score two precomputed descriptor sets."""
        if target_set.count < MIN_DESCRIPTORS or standard_set.count < MIN_DESCRIPTORS:
            logger.debug(
                "Too few descriptors to score pair",
                extra={
                    "target_descriptors": target_set.count,
                    "standard_descriptors": standard_set.count,
                },
            )
            return NotComputable(
                reason=(
                    f"insufficient descriptors (target={target_set.count}, "
                    f"standard={standard_set.count})"
                )
            )

        # The standard is the reference set, the target supplies the queries
        neighbours = knn(reference=standard_set, queries=target_set, k=NEIGHBOURS)
        quality = good_match_proportion(neighbours.distances, ratio)
        return ComputedQuality(value=quality)
