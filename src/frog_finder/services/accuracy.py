"""Top-1 identification accuracy for best-only batch results."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from frog_finder.models import AccuracyReport

if TYPE_CHECKING:
    from frog_finder.models import BatchResultTable


def evaluate_accuracy(table: BatchResultTable) -> AccuracyReport:
    """
    Compare each target's predicted standard with its true identity.

    Only the three digit frog id is compared; the tag distinguishes photos
    of one frog, not different frogs. A row whose quality could not be
    computed still names a standard and is scored like any other row.

    Args:
        table: Best-only results, one row per target

    Returns:
        Percent correct and the (true id, predicted id) confusion counts

    Raises:
        ValueError: If the table is empty or has several rows for a target
    """
    if len(table) == 0:
        raise ValueError("Cannot evaluate accuracy of an empty result table")

    target_paths = [row.target_path for row in table]
    if len(set(target_paths)) != len(target_paths):
        raise ValueError("Accuracy needs a best-only table with one row per target")

    confusion: Counter[tuple[str, str]] = Counter(
        (row.target.frog_id, row.standard.frog_id) for row in table
    )
    correct = sum(
        count for (true_id, predicted_id), count in confusion.items() if true_id == predicted_id
    )
    total = len(table)

    return AccuracyReport(
        percent_correct=correct / total,
        confusion_matrix=dict(confusion),
        total=total,
        correct=correct,
    )
