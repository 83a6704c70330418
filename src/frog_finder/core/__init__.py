"""Core primitives shared across the pipeline."""

from frog_finder.core.exceptions import (
    FrogFinderError,
    ImageCorrupt,
    ImageNotFound,
    MalformedFilename,
    StandardsEmpty,
    StandardsNotFound,
    TargetsEmpty,
    TargetsNotFound,
)

__all__ = [
    "FrogFinderError",
    "ImageCorrupt",
    "ImageNotFound",
    "MalformedFilename",
    "StandardsEmpty",
    "StandardsNotFound",
    "TargetsEmpty",
    "TargetsNotFound",
]
