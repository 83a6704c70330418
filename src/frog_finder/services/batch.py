"""
Batch matching of one or many targets against a standards directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from frog_finder.core.exceptions import TargetsNotFound
from frog_finder.logging import get_logger
from frog_finder.models import BatchResultTable, PairMatchScore
from frog_finder.services.ranker import list_files, list_standards

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from frog_finder.models import RankedMatchTable
    from frog_finder.services.ranker import TargetRanker

logger = get_logger("batch")


def resolve_targets(targets: Path) -> list[Path]:
    """
    Expand the targets argument to a list of image paths.

    A directory expands to the files directly inside it, sorted by name.
    Any other existing path is a single target.

    Raises:
        TargetsNotFound: If the path does not exist
    """
    if not targets.exists():
        raise TargetsNotFound(targets)
    if targets.is_dir():
        return list_files(targets)
    return [targets]


class BatchMatcher:
    """Run the ranker over a set of targets and collect result rows."""

    def __init__(self, ranker: TargetRanker) -> None:
        self.ranker = ranker

    def match(
        self,
        targets: Path,
        standards: Path,
        ratio: float,
        best_only: bool,
        on_target: Callable[[RankedMatchTable], None] | None = None,
    ) -> BatchResultTable:
        """
        Match targets against the standards directory.

        Args:
            targets: Target image file or directory of target images
            standards: Directory of standard images
            ratio: Lowe ratio in (0, 1]
            best_only: Keep only the top-ranked standard per target
            on_target: Called with each target's ranked table as it completes

        Returns:
            Rows in target order; each target's rows keep ranked order

        Raises:
            TargetsNotFound: If targets does not exist
            StandardsNotFound: If the standards directory does not exist
            StandardsEmpty: If the standards directory has no files
        """
        target_paths = resolve_targets(targets)
        standard_paths = list_standards(standards)

        logger.info(
            "Starting batch",
            extra={
                "targets": len(target_paths),
                "standards": len(standard_paths),
                "ratio": ratio,
                "best_only": best_only,
            },
        )

        rows: list[PairMatchScore] = []
        for target_path in target_paths:
            ranked = self.ranker.rank(target_path, standard_paths, ratio)
            if on_target is not None:
                on_target(ranked)
            if best_only:
                best = ranked.best
                if not best.outcome.is_computable:
                    logger.warning(
                        "No standard could be scored for target",
                        extra={"target": ranked.target.name, "path": str(target_path)},
                    )
                rows.append(best)
            else:
                rows.extend(ranked.rows)

        logger.info("Finished batch", extra={"rows": len(rows)})
        return BatchResultTable(rows=tuple(rows), best_only=best_only)
