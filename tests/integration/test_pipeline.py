"""
End-to-end pipeline tests with real OpenCV processing.

Standards are random noise images. A target that is a copy of one
standard must rank that standard first.
"""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING

import pytest

from frog_finder.core.exceptions import StandardsEmpty, StandardsNotFound, TargetsNotFound
from frog_finder.pipeline import batch_match, evaluate_accuracy
from tests.factories import create_noise_image, create_solid_image

if TYPE_CHECKING:
    from pathlib import Path

    from frog_finder.config import Settings


@pytest.fixture
def standards(tmp_path: Path) -> Path:
    """Three distinct textured standards."""
    directory = tmp_path / "standards"
    directory.mkdir()
    for seed, name in enumerate(["001_a_pond.png", "002_a_creek.png", "003_a_bog.png"], start=10):
        create_noise_image(directory / name, seed=seed)
    return directory


@pytest.fixture
def targets(tmp_path: Path, standards: Path) -> Path:
    """Re-photographed copies of frogs 002 and 003."""
    directory = tmp_path / "targets"
    directory.mkdir()
    shutil.copy(standards / "002_a_creek.png", directory / "002_b_field.png")
    shutil.copy(standards / "003_a_bog.png", directory / "003_c_field.png")
    return directory


@pytest.mark.integration
class TestBatchMatch:
    """End-to-end tests for batch_match."""

    def test_copy_ranks_its_standard_first(
        self, targets: Path, standards: Path, settings: Settings
    ) -> None:
        """Each target's best standard is the frog it was copied from."""
        table = batch_match(targets, standards, ratio=0.6, best_only=True, settings=settings)

        assert [(row.target.name, row.standard.name) for row in table] == [
            ("002_b", "002_a"),
            ("003_c", "003_a"),
        ]
        assert all(row.outcome.is_computable for row in table)
        assert all(row.quality > 0.5 for row in table)

    def test_full_table(self, targets: Path, standards: Path, settings: Settings) -> None:
        """Two targets by three standards gives six grouped, sorted rows."""
        table = batch_match(targets, standards, ratio=0.6, best_only=False, settings=settings)

        assert len(table) == 6
        for start in (0, 3):
            group = table.rows[start : start + 3]
            assert len({row.target.name for row in group}) == 1
            qualities = [row.quality for row in group]
            assert qualities == sorted(qualities, reverse=True)
            assert all(0.0 <= q <= 1.0 for q in qualities)

    def test_accuracy_of_copies(self, targets: Path, standards: Path, settings: Settings) -> None:
        """Copies are identified perfectly."""
        table = batch_match(targets, standards, ratio=0.6, best_only=True, settings=settings)

        report = evaluate_accuracy(table)

        assert report.percent_correct == 1.0
        assert report.confusion_matrix == {("002", "002"): 1, ("003", "003"): 1}

    def test_unknown_frog_still_gets_a_row(
        self, tmp_path: Path, standards: Path, settings: Settings
    ) -> None:
        """A frog absent from the corpus still gets its highest scoring standard."""
        target = create_noise_image(tmp_path / "009_a_new.png", seed=99)

        table = batch_match(target, standards, ratio=0.6, best_only=True, settings=settings)

        assert len(table) == 1
        assert table[0].target.name == "009_a"
        assert table[0].standard.frog_id in {"001", "002", "003"}

    def test_featureless_corpus_keeps_sentinel(self, tmp_path: Path, settings: Settings) -> None:
        """Nothing to match against gives a not computable best row."""
        standards = tmp_path / "flat"
        standards.mkdir()
        create_solid_image(standards / "001_a_x.png", 40)
        create_solid_image(standards / "002_a_y.png", 200)
        target = create_noise_image(tmp_path / "003_a_z.png", seed=5)

        table = batch_match(target, standards, ratio=0.6, best_only=True, settings=settings)

        assert len(table) == 1
        assert not table[0].outcome.is_computable
        assert table[0].standard.name == "001_a"

    def test_thread_pool_gives_same_table(
        self, targets: Path, standards: Path, settings: Settings
    ) -> None:
        """Parallel scoring does not change results."""
        sequential = batch_match(targets, standards, 0.6, best_only=False, settings=settings)
        parallel_settings = settings.model_copy(
            update={"batch": settings.batch.model_copy(update={"workers": 3})}
        )
        parallel = batch_match(
            targets, standards, 0.6, best_only=False, settings=parallel_settings
        )

        assert sequential.to_dataframe().equals(parallel.to_dataframe())

    def test_accepts_string_paths(
        self, targets: Path, standards: Path, settings: Settings
    ) -> None:
        """Paths may be given as strings."""
        table = batch_match(str(targets), str(standards), 0.6, settings=settings)

        assert len(table) == 2

    def test_errors(self, tmp_path: Path, targets: Path, settings: Settings) -> None:
        """Structural problems abort with typed errors."""
        with pytest.raises(TargetsNotFound):
            batch_match(tmp_path / "missing", tmp_path, 0.6, settings=settings)
        with pytest.raises(StandardsNotFound):
            batch_match(targets, tmp_path / "missing", 0.6, settings=settings)
        (tmp_path / "empty").mkdir()
        with pytest.raises(StandardsEmpty):
            batch_match(targets, tmp_path / "empty", 0.6, settings=settings)
