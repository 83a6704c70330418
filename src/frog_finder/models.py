"""Data models for match outcomes and result tables."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from frog_finder.identity import Identity

# Numeric value written in place of a quality that could not be computed
NOT_COMPUTABLE_VALUE = -1.0
NO_MATCH_MARKER = "no-match"

RESULT_COLUMNS: tuple[str, ...] = ("Target", "Standard", "MatchQual", "StdImg")


@dataclass(frozen=True)
class ComputedQuality:
    """Fraction of target descriptors with a distinctive nearest standard descriptor."""

    value: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 1.0:
            raise ValueError(f"Match quality must be in [0, 1], got {self.value}")

    @property
    def is_computable(self) -> bool:
        return True

    @property
    def sort_key(self) -> tuple[int, float]:
        return (1, self.value)

    def as_float(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:.4f}"


@dataclass(frozen=True)
class NotComputable:
    """Quality could not be computed (too few descriptors on either side)."""

    reason: str

    @property
    def is_computable(self) -> bool:
        return False

    @property
    def sort_key(self) -> tuple[int, float]:
        # Below every ComputedQuality, including 0.0
        return (0, 0.0)

    def as_float(self) -> float:
        return NOT_COMPUTABLE_VALUE

    def __str__(self) -> str:
        return NO_MATCH_MARKER


MatchOutcome = ComputedQuality | NotComputable


@dataclass(frozen=True)
class PairMatchScore:
    """Score of one target photo against one standard photo."""

    target: Identity
    standard: Identity
    outcome: MatchOutcome
    target_path: Path
    standard_path: Path

    @property
    def quality(self) -> float:
        """Numeric quality, ``-1.0`` when not computable."""
        return self.outcome.as_float()


@dataclass(frozen=True)
class RankedMatchTable:
    """All standards scored against one target, best first."""

    target: Identity
    target_path: Path
    rows: tuple[PairMatchScore, ...]

    @property
    def best(self) -> PairMatchScore:
        return self.rows[0]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[PairMatchScore]:
        return iter(self.rows)


@dataclass(frozen=True)
class BatchResultTable:
    """Result rows for a batch of targets, in target submission order."""

    rows: tuple[PairMatchScore, ...]
    best_only: bool

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[PairMatchScore]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> PairMatchScore:
        return self.rows[index]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Export rows as a data frame.

        Columns are Target, Standard, MatchQual and StdImg. Qualities that
        could not be computed are written as -1.
        """
        records = [
            {
                "Target": row.target.name,
                "Standard": row.standard.name,
                "MatchQual": row.quality,
                "StdImg": str(row.standard_path),
            }
            for row in self.rows
        ]
        return pd.DataFrame.from_records(records, columns=list(RESULT_COLUMNS))


@dataclass(frozen=True)
class AccuracyReport:
    """Top-1 identification accuracy for a best-only batch."""

    percent_correct: float
    confusion_matrix: dict[tuple[str, str], int]
    total: int
    correct: int

    def to_crosstab(self) -> pd.DataFrame:
        """Confusion matrix as a true-id by predicted-id table of counts."""
        true_ids: list[str] = []
        predicted_ids: list[str] = []
        for (true_id, predicted_id), count in sorted(self.confusion_matrix.items()):
            true_ids.extend([true_id] * count)
            predicted_ids.extend([predicted_id] * count)
        return pd.crosstab(
            pd.Series(true_ids, name="true_id"),
            pd.Series(predicted_ids, name="predicted_id"),
        )
