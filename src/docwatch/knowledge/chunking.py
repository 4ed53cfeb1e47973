"""Split oversized source files into bounded chunks along declaration boundaries."""

import logging
import re

logger = logging.getLogger(__name__)

# Start of a top-level-looking declaration: optional JSDoc block, optional
# decorator lines, optional export / export default, optional async, then a
# declaration keyword.
DECLARATION_BOUNDARY_RE = re.compile(
    r"^[ \t]*"
    r"(?:/\*\*(?:(?!\*/)[\s\S])*\*/[ \t]*\n[ \t]*)?"
    r"(?:@[^\n]*\n[ \t]*)*"
    r"(?:export[ \t]+(?:default[ \t]+)?)?"
    r"(?:async[ \t]+)?"
    r"(?:"
    r"function\b"
    r"|class\b"
    r"|interface\b"
    r"|enum\b"
    r"|type[ \t]+\w+"
    r"|(?:const|let)[ \t]+\w+[ \t]*=[ \t]*(?:async[ \t]*)?(?:\(|function\b)"
    r"|def\b"
    r")",
    re.MULTILINE,
)


def find_boundaries(text: str) -> list[int]:
    """Return the start offsets of declaration-like lines in ``text``."""
    return [match.start() for match in DECLARATION_BOUNDARY_RE.finditer(text)]


def split_by_lines(text: str, max_size: int) -> list[str]:
    """Greedily pack whole lines into chunks of at most ``max_size`` characters.

    A single line longer than ``max_size`` becomes its own chunk; lines are
    never cut. Whitespace-only chunks are dropped.
    """
    chunks: list[str] = []
    current = ""

    for line in text.split("\n"):
        candidate = f"{current}\n{line}" if current else line
        if current and len(candidate) > max_size:
            if current.strip():
                chunks.append(current)
            current = line
        else:
            current = candidate

    if current.strip():
        chunks.append(current)

    return chunks


def chunk_text(text: str, max_size: int) -> list[str]:
    """Split ``text`` into chunks no longer than ``max_size`` characters.

    Text that already fits is returned unchanged as a single chunk. Larger
    text is cut at declaration boundaries (functions, classes, interfaces,
    types, enums, arrow-function constants); any span still too large, or
    text with at most one boundary, falls back to line packing.

    Args:
        text: The text to split
        max_size: Maximum chunk length in characters

    Returns:
        list[str]: Non-empty chunks in document order

    Raises:
        ValueError: If max_size is not positive
    """
    if max_size <= 0:
        raise ValueError("max_size must be positive")

    if len(text) <= max_size:
        return [text]

    boundaries = find_boundaries(text)
    if len(boundaries) <= 1:
        logger.debug("No useful declaration boundaries, splitting by lines")
        return split_by_lines(text, max_size)

    split_points = sorted({0, *boundaries, len(text)})
    chunks: list[str] = []
    for begin, end in zip(split_points, split_points[1:]):
        span = text[begin:end].strip()
        if not span:
            continue
        if len(span) > max_size:
            chunks.extend(split_by_lines(span, max_size))
        else:
            chunks.append(span)

    logger.debug(f"Split {len(text)} characters at {len(boundaries)} boundaries into {len(chunks)} chunks")
    return chunks
