"""Data models for the knowledge base."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Matches the " (part 2/5)" suffix appended to chunks of split files
PART_SUFFIX_RE = re.compile(r" \(part \d+/\d+\)$")


class ContentType(str, Enum):
    """Closed set of content categories derived from a file's extension."""

    CODE = "code"
    DOCUMENTATION = "documentation"
    CONFIGURATION = "configuration"
    OTHER = "other"


@dataclass(frozen=True)
class ChunkMetadata:
    """Provenance of a chunk.

    Attributes:
        source: Repository-relative path, optionally suffixed with " (part i/N)"
        type: Content category of the source file
    """

    source: str
    type: ContentType = ContentType.OTHER

    @property
    def source_path(self) -> str:
        """The source with any " (part i/N)" suffix removed."""
        return PART_SUFFIX_RE.sub("", self.source)


@dataclass
class DocumentChunk:
    """A piece of a source file with its embedding and provenance.

    Attributes:
        content: The literal text of the chunk
        embedding: Vector embedding of the content
        metadata: Source path and content type
    """

    content: str
    embedding: list[float]
    metadata: ChunkMetadata

    @property
    def source(self) -> str:
        return self.metadata.source

    @property
    def source_path(self) -> str:
        return self.metadata.source_path

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot record format."""
        return {
            "content": self.content,
            "embedding": list(self.embedding),
            "metadata": {
                "source": self.metadata.source,
                "type": self.metadata.type.value,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentChunk":
        """Build a chunk from a snapshot record.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        metadata = data["metadata"]
        content = data["content"]
        if not isinstance(content, str):
            raise TypeError("chunk content must be a string")
        raw_type = metadata.get("type", ContentType.OTHER.value)
        try:
            content_type = ContentType(raw_type)
        except ValueError:
            content_type = ContentType.OTHER
        return cls(
            content=content,
            embedding=[float(value) for value in data["embedding"]],
            metadata=ChunkMetadata(source=str(metadata["source"]), type=content_type),
        )


@dataclass
class IngestStats:
    """Aggregate results of a repository ingestion pass.

    Attributes:
        files: Files read and added to the store
        chunks: Chunks appended to the store
        errors: Files that failed to read or embed
        skipped: Files skipped by path-substring exclusions
        by_type: Number of ingested files per content type
        total_size: Characters read across ingested files
    """

    files: int = 0
    chunks: int = 0
    errors: int = 0
    skipped: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    total_size: int = 0

    def record_file(self, content_type: ContentType, size: int, chunk_count: int) -> None:
        self.files += 1
        self.chunks += chunk_count
        self.total_size += size
        self.by_type[content_type.value] = self.by_type.get(content_type.value, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": self.files,
            "chunks": self.chunks,
            "errors": self.errors,
            "skipped": self.skipped,
            "by_type": dict(self.by_type),
            "total_size": self.total_size,
        }
