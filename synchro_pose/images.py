"""
Image list reader.

The image list holds one file name per line, in capture order, without a
header. Names are paired with event markers by position.
"""

from pathlib import Path
from typing import Iterable, List
import logging

logger = logging.getLogger(__name__)


def parse_image_names(lines: Iterable[str]) -> List[str]:
    """Return the stripped, non-blank lines as image names."""
    return [line.strip() for line in lines if line.strip()]


def read_image_names(filepath: str) -> List[str]:
    """
    Read an image list file.

    Args:
        filepath: Path to the image list

    Returns:
        Image file names in file order
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Image list not found: {filepath}")

    with open(path, 'r', encoding='utf-8') as f:
        images = parse_image_names(f)

    logger.info(f"Read {len(images)} image names from {filepath}")
    return images
