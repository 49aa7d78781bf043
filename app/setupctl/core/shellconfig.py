"""Idempotent shell configuration blocks.

Each block is written between tagged marker lines. A block whose
opening marker is already present in the target file is left alone, so
re-running never duplicates content.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

MARKER_PREFIX = "setupctl"


class ShellBlock(BaseModel):
    """A tagged block of text appended to a shell configuration file.

    Attributes:
        tag: Unique tag identifying the block in the target file.
        content: Text to insert between the markers.
    """

    model_config = ConfigDict(extra="forbid")

    tag: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    content: str

    @property
    def begin_marker(self) -> str:
        """Opening marker line."""
        return f"# >>> {MARKER_PREFIX}:{self.tag} >>>"

    @property
    def end_marker(self) -> str:
        """Closing marker line."""
        return f"# <<< {MARKER_PREFIX}:{self.tag} <<<"

    def render(self) -> str:
        """Render the block with its markers."""
        body = self.content.rstrip("\n")
        return f"{self.begin_marker}\n{body}\n{self.end_marker}\n"


@dataclass(frozen=True, slots=True)
class BlockResult:
    """Result of applying one block.

    Attributes:
        tag: Tag of the block.
        applied: True if the block was appended, False if already present.
    """

    tag: str
    applied: bool


def apply_blocks(target: Path, blocks: list[ShellBlock]) -> list[BlockResult]:
    """Append every block whose marker is not yet in the target file.

    Creates the target file if needed. Blocks are applied in order.

    Args:
        target: Shell configuration file (e.g., ~/.zshrc).
        blocks: Blocks to ensure.

    Returns:
        One BlockResult per block.

    Raises:
        OSError: If the target cannot be read or written.
    """
    existing = target.read_text(encoding="utf-8") if target.exists() else ""
    present = {line.strip() for line in existing.splitlines()}

    results: list[BlockResult] = []
    pending: list[str] = []

    for block in blocks:
        if block.begin_marker in present:
            results.append(BlockResult(tag=block.tag, applied=False))
            continue
        pending.append(block.render())
        present.add(block.begin_marker)
        results.append(BlockResult(tag=block.tag, applied=True))

    if pending:
        target.parent.mkdir(parents=True, exist_ok=True)
        separator = "" if not existing or existing.endswith("\n") else "\n"
        with target.open(mode="a", encoding="utf-8") as f:
            f.write(separator + "\n" + "\n".join(pending))
        logger.debug("Appended %d block(s) to %s", len(pending), target)

    return results
