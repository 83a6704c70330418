"""
Entry points for matching and accuracy evaluation.

Usage:
    from frog_finder.pipeline import batch_match, evaluate_accuracy

    table = batch_match(Path("targets"), Path("standards"), ratio=0.6, best_only=True)
    report = evaluate_accuracy(table)
"""

from __future__ import annotations

from pathlib import Path

from frog_finder.config import Settings, get_settings
from frog_finder.models import BatchResultTable
from frog_finder.services.accuracy import evaluate_accuracy
from frog_finder.services.batch import BatchMatcher
from frog_finder.services.feature_detector import FeatureDetector
from frog_finder.services.ranker import TargetRanker
from frog_finder.services.scorer import PairwiseMatchScorer

__all__ = ["batch_match", "create_batch_matcher", "evaluate_accuracy"]


def create_batch_matcher(settings: Settings, workers: int | None = None) -> BatchMatcher:
    """
    Wire detector, scorer, ranker and batch matcher from settings.

    Args:
        settings: Loaded configuration
        workers: Optional override for the thread pool size

    Returns:
        Ready-to-use batch matcher
    """
    detector = FeatureDetector(
        n_octave_layers=settings.detector.n_octave_layers,
        edge_threshold=settings.detector.edge_threshold,
        sigma=settings.detector.sigma,
    )
    scorer = PairwiseMatchScorer.from_config(detector, settings.detector)
    ranker = TargetRanker(
        scorer=scorer,
        workers=workers if workers is not None else settings.batch.workers,
    )
    return BatchMatcher(ranker)


def batch_match(
    targets: str | Path,
    standards: str | Path,
    ratio: float,
    best_only: bool = True,
    settings: Settings | None = None,
) -> BatchResultTable:
    """
    Match target images against a directory of standards.

    Args:
        targets: Target image file or directory
        standards: Standards directory
        ratio: Lowe ratio in (0, 1]
        best_only: Keep only each target's top-ranked standard
        settings: Configuration; loaded from config.yaml when omitted

    Returns:
        Batch result table

    Raises:
        TargetsNotFound: If targets does not exist
        StandardsNotFound: If the standards directory does not exist
        StandardsEmpty: If the standards directory has no files
    """
    if settings is None:
        settings = get_settings()
    matcher = create_batch_matcher(settings)
    return matcher.match(Path(targets), Path(standards), ratio, best_only)
