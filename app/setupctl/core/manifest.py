"""Manifest file loading.

A manifest is a plain UTF-8 text file with one identifier per line.
Everything from the first unescaped ``#`` onward is a comment; blank and
comment-only lines are skipped. ``\\#`` stands for a literal ``#``.
"""

import logging
from importlib import resources
from pathlib import Path

from setupctl.models.manifest import ManifestItem

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestNotFoundError(ManifestError):
    """Raised when a manifest file does not exist."""


class ManifestUnreadableError(ManifestError):
    """Raised when a manifest file cannot be read or decoded."""


def split_comment(line: str) -> tuple[str, str | None]:
    """Split a manifest line into content and trailing comment.

    Args:
        line: Raw manifest line without the newline.

    Returns:
        Tuple of (content, comment). Content has escapes resolved but is
        not trimmed. Comment is None when the line has no ``#``.
    """
    content: list[str] = []
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\" and i + 1 < len(line) and line[i + 1] == "#":
            content.append("#")
            i += 2
            continue
        if char == "#":
            return "".join(content), line[i + 1 :].strip()
        content.append(char)
        i += 1
    return "".join(content), None


def parse_manifest(text: str) -> list[ManifestItem]:
    """Parse manifest text into ordered items.

    Duplicate identifiers are kept; each occurrence becomes its own item.

    Args:
        text: Full manifest content.

    Returns:
        Items in file order.
    """
    items: list[ManifestItem] = []
    for line_num, raw in enumerate(text.splitlines(), start=1):
        content, comment = split_comment(raw)
        identifier = content.strip()
        if not identifier:
            continue
        items.append(ManifestItem(identifier=identifier, comment=comment or None, line=line_num))
    return items


def load_manifest(path: Path) -> list[ManifestItem]:
    """Load a manifest file.

    Args:
        path: Path to the manifest file.

    Returns:
        Items in file order.

    Raises:
        ManifestNotFoundError: If the file doesn't exist.
        ManifestUnreadableError: If the file cannot be read or is not UTF-8.
    """
    if not path.exists():
        raise ManifestNotFoundError(f"Manifest not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestUnreadableError(f"Manifest is not valid UTF-8: {path}: {e}") from e
    except OSError as e:
        raise ManifestUnreadableError(f"Failed to read manifest {path}: {e}") from e

    items = parse_manifest(text)
    logger.debug("Loaded %d item(s) from %s", len(items), path)
    return items


def bundled_manifest_text(filename: str) -> str:
    """Return the content of a manifest shipped with setupctl.

    Args:
        filename: Manifest file name inside ``setupctl.data.manifests``.

    Returns:
        Manifest text.
    """
    return resources.files("setupctl.data.manifests").joinpath(filename).read_text(encoding="utf-8")
