"""Service layer components."""

from frog_finder.services.accuracy import evaluate_accuracy
from frog_finder.services.batch import BatchMatcher, resolve_targets
from frog_finder.services.feature_detector import DescriptorSet, FeatureDetector
from frog_finder.services.knn import NeighborResult, knn
from frog_finder.services.ranker import TargetRanker, list_standards
from frog_finder.services.ratio_test import good_match_proportion
from frog_finder.services.scorer import PairwiseMatchScorer

__all__ = [
    "BatchMatcher",
    "DescriptorSet",
    "FeatureDetector",
    "NeighborResult",
    "PairwiseMatchScorer",
    "TargetRanker",
    "evaluate_accuracy",
    "good_match_proportion",
    "knn",
    "list_standards",
    "resolve_targets",
]
