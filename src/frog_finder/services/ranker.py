"""
Rank every standard image against one target image.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from frog_finder.core.exceptions import StandardsEmpty, StandardsNotFound
from frog_finder.identity import Identity, parse_identity
from frog_finder.logging import get_logger
from frog_finder.models import PairMatchScore, RankedMatchTable
from frog_finder.services.image_loader import load_image

if TYPE_CHECKING:
    from collections.abc import Sequence

    from frog_finder.services.scorer import PairwiseMatchScorer

logger = get_logger("ranker")


def list_files(directory: Path) -> list[Path]:
    """Regular files directly inside a directory, sorted by name."""
    return sorted((p for p in directory.iterdir() if p.is_file()), key=lambda p: p.name)


def list_standards(directory: Path) -> list[Path]:
    """
    List the standard images in a directory.

    Every regular file counts, hidden files included. Order is by filename
    so ties in match quality resolve the same way on every platform.

    Raises:
        StandardsNotFound: If the directory does not exist
        StandardsEmpty: If it holds no files
    """
    if not directory.is_dir():
        raise StandardsNotFound(directory)
    standards = list_files(directory)
    if not standards:
        raise StandardsEmpty(directory)
    return standards


class TargetRanker:
    """Score a target against a corpus of standards and sort by quality."""

    def __init__(self, scorer: PairwiseMatchScorer, workers: int) -> None:
        """
        Initialize ranker.

        Args:
            scorer: Pairwise scorer
            workers: Thread pool size for scoring standards; 1 runs inline
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.scorer = scorer
        self.workers = workers

    def rank(
        self,
        target_path: Path,
        standards: Sequence[Path],
        ratio: float,
    ) -> RankedMatchTable:
        """
        Rank standards for one target, best first.

        Args:
            target_path: Target image path
            standards: Standard image paths in corpus order
            ratio: Lowe ratio in (0, 1]

        Returns:
            Every standard's score, sorted by quality descending. Ties keep
            corpus order and scores that could not be computed come last.

        Raises:
            StandardsEmpty: If standards is empty
            MalformedFilename: If a target or standard name is malformed
            ImageNotFound: If an image is missing
            ImageCorrupt: If an image cannot be decoded
        """
        if not standards:
            raise StandardsEmpty(None)

        target = parse_identity(target_path.name)
        # Parse every name before any image work so malformed corpora fail fast
        identities = [parse_identity(path.name) for path in standards]
        target_image = load_image(target_path)

        def score_standard(item: tuple[Identity, Path]) -> PairMatchScore:
            standard, standard_path = item
            outcome = self.scorer.score(target_image, load_image(standard_path), ratio)
            logger.debug(
                "Scored pair",
                extra={"target": target.name, "standard": standard.name, "quality": str(outcome)},
            )
            return PairMatchScore(
                target=target,
                standard=standard,
                outcome=outcome,
                target_path=target_path,
                standard_path=standard_path,
            )

        items = list(zip(identities, standards, strict=True))
        if self.workers == 1:
            scores = [score_standard(item) for item in items]
        else:
            # map yields in submission order, which is the tie-break order
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                scores = list(executor.map(score_standard, items))

        # sorted() keeps ties in input order even with reverse=True
        ranked = sorted(scores, key=lambda s: s.outcome.sort_key, reverse=True)

        logger.info(
            "Ranked target",
            extra={
                "target": target.name,
                "standards": len(ranked),
                "best_standard": ranked[0].standard.name,
                "best_quality": str(ranked[0].outcome),
            },
        )

        return RankedMatchTable(target=target, target_path=target_path, rows=tuple(ranked))
