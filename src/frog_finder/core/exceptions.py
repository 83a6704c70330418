"""Domain exceptions for the matching pipeline.

Every structural failure aborts the whole batch. Descriptor insufficiency
is not an error here; it is reported as a ``NotComputable`` outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class FrogFinderError(Exception):
    """
    Base exception for pipeline errors.

    Attributes:
        error: Machine-readable error code
        message: Human-readable description
        details: Additional context (offending path, stage)
    """

    def __init__(
        self,
        error: str,
        message: str,
        details: dict[str, object] | None,
    ) -> None:
        self.error = error
        self.message = message
        if details is None:
            self.details: dict[str, object] = {}
        else:
            self.details = details
        super().__init__(message)


class TargetsNotFound(FrogFinderError):
    """Target file or directory does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            error="targets_not_found",
            message=f"Can't find target frog images: {path}",
            details={"path": str(path), "stage": "resolve_targets"},
        )


class StandardsNotFound(FrogFinderError):
    """Standards directory does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            error="standards_not_found",
            message=f"Standards directory not found: {path}",
            details={"path": str(path), "stage": "list_standards"},
        )


class StandardsEmpty(FrogFinderError):
    """No standard images are available to rank against."""

    def __init__(self, path: Path | None) -> None:
        where = f": {path}" if path is not None else ""
        super().__init__(
            error="standards_empty",
            message=f"No standards available{where}",
            details={"path": str(path) if path is not None else None, "stage": "list_standards"},
        )


class MalformedFilename(FrogFinderError):
    """Filename does not follow the ``<id>_<tag>_<suffix>.<ext>`` grammar."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            error="malformed_filename",
            message=(
                f"Malformed image filename: {filename!r} "
                "(expected <3-digit-id>_<1-char-tag>_<suffix>.<ext>)"
            ),
            details={"filename": filename, "stage": "parse_identity"},
        )


class ImageNotFound(FrogFinderError):
    """Image path is missing."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            error="image_not_found",
            message=f"Image not found: {path}",
            details={"path": str(path), "stage": "load_image"},
        )


class ImageCorrupt(FrogFinderError):
    """Image exists but cannot be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            error="image_corrupt",
            message=f"Failed to decode image {path}: {reason}",
            details={"path": str(path), "stage": "load_image", "reason": reason},
        )


class TargetsEmpty(FrogFinderError):
    """Target directory holds no images to evaluate."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            error="targets_empty",
            message=f"No target frog images to evaluate: {path}",
            details={"path": str(path), "stage": "evaluate_accuracy"},
        )
