"""Pick the executable out of an extracted release archive."""

import logging
from pathlib import Path
from typing import List, Union

from .errors import AmbiguousBinaryError
from .sniff import OCTET_STREAM, SNIFF_LENGTH, detect_content_type

logger = logging.getLogger(__name__)

# bundled alongside the binary in most release archives
IGNORED_NAMES = frozenset({"README.md", "LICENSE"})


def find_candidates(directory: Union[str, Path]) -> List[Path]:
    """
    List top-level files in ``directory`` that sniff as generic binary data.

    Args:
        directory: Directory populated by archive extraction

    Returns:
        Candidate paths, sorted by name
    """
    candidates = []

    for item in sorted(Path(directory).iterdir(), key=lambda p: p.name):
        if item.name in IGNORED_NAMES:
            continue

        try:
            with item.open("rb") as f:
                head = f.read(SNIFF_LENGTH)
        except OSError as e:
            logger.warning(f"failed to read file '{item.name}': {e}")
            continue

        content_type = detect_content_type(head)
        logger.debug(f"Sniffed '{item.name}' as {content_type}")
        if content_type == OCTET_STREAM:
            candidates.append(item)

    return candidates


def classify(directory: Union[str, Path]) -> Path:
    """
    Return the single binary in ``directory``.

    Raises:
        AmbiguousBinaryError: Zero or more than one candidate was found
    """
    candidates = find_candidates(directory)
    if len(candidates) != 1:
        raise AmbiguousBinaryError(len(candidates))

    logger.debug(f"selected binary '{candidates[0].name}' from tar")
    return candidates[0]
