"""Utility functions for knowledge base operations."""

import math
import posixpath
from collections.abc import Iterable

from docwatch.constants import (
    CODE_EXTENSIONS,
    CONFIGURATION_EXTENSIONS,
    DOCUMENTATION_EXTENSIONS,
    RECOGNIZED_EXTENSIONS,
)
from docwatch.knowledge.models import PART_SUFFIX_RE, ContentType


def cosine_similarity(vec_a: list[float], vec_b: list[float]) -> float:
    """Compute cosine similarity between two vectors.

    Args:
        vec_a: First embedding vector
        vec_b: Second embedding vector

    Returns:
        float: Cosine similarity in [-1, 1]; 0.0 for empty, mismatched or zero-norm vectors
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    magnitude_a = math.sqrt(sum(a * a for a in vec_a))
    magnitude_b = math.sqrt(sum(b * b for b in vec_b))

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def file_extension(path: str) -> str:
    """Lower-cased extension of a path, ignoring any " (part i/N)" suffix."""
    clean = PART_SUFFIX_RE.sub("", path)
    return posixpath.splitext(clean.replace("\\", "/"))[1].lower()


def classify_content_type(path: str) -> ContentType:
    """Map a file path to its content category by extension.

    Total over all inputs: anything unrecognised is ContentType.OTHER.
    """
    ext = file_extension(path)
    if ext in CODE_EXTENSIONS:
        return ContentType.CODE
    if ext in DOCUMENTATION_EXTENSIONS:
        return ContentType.DOCUMENTATION
    if ext in CONFIGURATION_EXTENSIONS:
        return ContentType.CONFIGURATION
    return ContentType.OTHER


def is_recognized_file(path: str) -> bool:
    """True if the file's extension is one the knowledge base ingests."""
    return file_extension(path) in RECOGNIZED_EXTENSIONS


def is_path_excluded(path: str, exclusions: Iterable[str]) -> bool:
    """True if any exclusion substring occurs in the repository-relative path."""
    normalized = path.replace("\\", "/")
    return any(pattern and pattern in normalized for pattern in exclusions)


def part_source(path: str, index: int, total: int) -> str:
    """Source label for chunk ``index`` (0-based) of a file split into ``total`` parts."""
    return f"{path} (part {index + 1}/{total})"
