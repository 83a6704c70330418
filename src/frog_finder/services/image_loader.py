"""Image decoding."""

from __future__ import annotations

from typing import TYPE_CHECKING

import cv2
import numpy as np

from frog_finder.core.exceptions import ImageCorrupt, ImageNotFound

if TYPE_CHECKING:
    from pathlib import Path

    from numpy.typing import NDArray


def load_image(path: Path) -> NDArray[np.uint8]:
    """
    Read and decode an image file as grayscale.

    Args:
        path: Image file path (JPEG, PNG, or anything OpenCV decodes)

    Returns:
        Grayscale pixel buffer of shape (height, width)

    Raises:
        ImageNotFound: If the path does not exist or is not a file
        ImageCorrupt: If the bytes cannot be decoded
    """
    if not path.is_file():
        raise ImageNotFound(path)

    nparr = np.frombuffer(path.read_bytes(), np.uint8)
    if nparr.size == 0:
        raise ImageCorrupt(path, "file is empty")

    try:
        image = cv2.imdecode(nparr, cv2.IMREAD_GRAYSCALE)
    except cv2.error as e:
        raise ImageCorrupt(path, str(e)) from e

    if image is None:
        raise ImageCorrupt(path, "unsupported or damaged image data")

    return image
