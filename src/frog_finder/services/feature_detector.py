"""
SIFT feature detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

# SIFT descriptor length
DESCRIPTOR_SIZE = 128


@dataclass(frozen=True)
class DescriptorSet:
    """Descriptors detected in one image."""

    descriptors: NDArray[np.float32]
    """Descriptor matrix (N, D)."""

    keypoints: tuple[dict[str, float], ...]
    """Keypoint metadata as {x, y, size, angle}, one per descriptor row."""

    @property
    def count(self) -> int:
        return int(self.descriptors.shape[0])

    @classmethod
    def empty(cls, dimension: int = DESCRIPTOR_SIZE) -> DescriptorSet:
        return cls(descriptors=np.empty((0, dimension), dtype=np.float32), keypoints=())


class FeatureDetector:
    """Detect SIFT keypoints and compute descriptors."""

    def __init__(
        self,
        n_octave_layers: int,
        edge_threshold: float,
        sigma: float,
    ) -> None:
        """
        Initialize SIFT feature detector.

        Args:
            n_octave_layers: Layers per octave in the scale space
            edge_threshold: Threshold used to filter out edge-like features
            sigma: Gaussian sigma applied to the input at octave 0
        """
        self.n_octave_layers = n_octave_layers
        self.edge_threshold = edge_threshold
        self.sigma = sigma

    def detect(
        self,
        image: NDArray[np.uint8],
        max_points: int,
        detection_threshold: float,
    ) -> DescriptorSet:
        """
        Detect keypoints and compute descriptors.

        Args:
            image: Grayscale pixel buffer
            max_points: Maximum number of keypoints to retain
            detection_threshold: SIFT contrast threshold; 0 keeps every
                extremum and is used for reference images

        Returns:
            Descriptor set with at most max_points rows
        """
        # Detectors are not shared between threads
        sift = cv2.SIFT_create(
            nfeatures=max_points,
            nOctaveLayers=self.n_octave_layers,
            contrastThreshold=detection_threshold,
            edgeThreshold=self.edge_threshold,
            sigma=self.sigma,
        )
        cv_keypoints, descriptors = sift.detectAndCompute(image, None)

        if descriptors is None or len(cv_keypoints) == 0:
            return DescriptorSet.empty()

        # SIFT may keep extra keypoints that tie on response at the cutoff
        if len(cv_keypoints) > max_points:
            order = sorted(
                range(len(cv_keypoints)),
                key=lambda i: cv_keypoints[i].response,
                reverse=True,
            )[:max_points]
            order.sort()
            cv_keypoints = [cv_keypoints[i] for i in order]
            descriptors = descriptors[order]

        keypoints = tuple(
            {
                "x": float(kp.pt[0]),
                "y": float(kp.pt[1]),
                "size": float(kp.size),
                "angle": float(kp.angle),
            }
            for kp in cv_keypoints
        )

        return DescriptorSet(
            descriptors=np.asarray(descriptors, dtype=np.float32),
            keypoints=keypoints,
        )
