"""
Frog identity parsing from image filenames.

File name format is ``xxx_y_z.ext``:

- ``xxx`` is the three digit identifier of the frog
- ``y`` is a one character tag distinguishing photos of the same frog
- ``z`` is any string

For example ``003_a_field_2007_winter.png`` and ``003_b_field_2008_spring.png``
are two photos of frog 003.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from frog_finder.core.exceptions import MalformedFilename

_FILENAME_PATTERN = re.compile(r"^(?P<frog_id>\d{3})_(?P<tag>[^_])_.*\.[^.]+$")


@dataclass(frozen=True)
class Identity:
    """Frog identity encoded in an image filename."""

    frog_id: str
    tag: str

    @property
    def name(self) -> str:
        """Identity token as ``<id>_<tag>``."""
        return f"{self.frog_id}_{self.tag}"

    def same_individual(self, other: Identity) -> bool:
        """Return True when both photos show the same frog, ignoring the tag."""
        return self.frog_id == other.frog_id

    def __str__(self) -> str:
        return self.name


def parse_identity(filename: str | Path) -> Identity:
    """
    Parse the identity from an image filename.

    Args:
        filename: Bare filename or path; only the final component is used

    Returns:
        Parsed identity

    Raises:
        MalformedFilename: If the name does not follow the fixed grammar
    """
    name = Path(filename).name
    match = _FILENAME_PATTERN.match(name)
    if match is None:
        raise MalformedFilename(name)
    return Identity(frog_id=match.group("frog_id"), tag=match.group("tag"))
