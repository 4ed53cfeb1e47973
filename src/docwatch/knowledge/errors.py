"""Exceptions raised by the knowledge base."""


class KnowledgeBaseError(Exception):
    """Base class for knowledge base failures."""


class KnowledgeBaseNotFoundError(KnowledgeBaseError, FileNotFoundError):
    """No persisted snapshot exists at the requested location."""


class SnapshotCorruptError(KnowledgeBaseError, ValueError):
    """A persisted snapshot could not be parsed or has an invalid shape."""


class EmbeddingDimensionError(KnowledgeBaseError, ValueError):
    """An embedding does not match the dimension already used by the store."""


class DocumentIngestError(KnowledgeBaseError):
    """Reading or embedding one file failed.

    Attributes:
        source: Repository-relative path of the file
        appended: Chunks of the file already appended before the failure
    """

    def __init__(self, source: str, appended: int, cause: BaseException) -> None:
        super().__init__(f"Failed to ingest {source}: {cause}")
        self.source = source
        self.appended = appended
