"""Configuration for the knowledge base."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from docwatch.constants import DEFAULT_INGEST_WORKERS, DEFAULT_MAX_CHUNK_SIZE

load_dotenv()

logger = logging.getLogger(__name__)


def _parse_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


class KnowledgeBaseConfig:
    """Configuration class for knowledge base locations and tuning."""

    @staticmethod
    def get_repo_name() -> str:
        """Get the monitored repository name (used to derive default paths).

        Returns:
            str: Repository name (default: repository)
        """
        return os.getenv("MONITOR_REPO_NAME", "") or "repository"

    @staticmethod
    def get_knowledge_base_path() -> Path:
        """Get the snapshot location from KNOWLEDGE_BASE_PATH.

        Returns:
            Path: Snapshot path (default: ./data/<repo>-knowledge.json)
        """
        env_path = os.getenv("KNOWLEDGE_BASE_PATH")
        if env_path:
            return Path(env_path)
        return Path.cwd() / "data" / f"{KnowledgeBaseConfig.get_repo_name()}-knowledge.json"

    @staticmethod
    def get_repo_path() -> Path:
        """Find the checked-out working tree of the monitored repository.

        REPO_PATH wins when set; otherwise ./test-repo/<repo> and ./repos/<repo>
        are tried in that order.

        Returns:
            Path: First existing candidate, or ./test-repo/<repo> if none exist
        """
        repo_name = KnowledgeBaseConfig.get_repo_name()
        candidates = [
            os.getenv("REPO_PATH"),
            str(Path.cwd() / "test-repo" / repo_name),
            str(Path.cwd() / "repos" / repo_name),
        ]
        for candidate in candidates:
            if candidate and Path(candidate).exists():
                return Path(candidate)
        return Path.cwd() / "test-repo" / repo_name

    @staticmethod
    def get_max_chunk_size() -> int:
        """Get the chunk size threshold in characters (default: 8000)."""
        return int(os.getenv("MAX_CHUNK_SIZE", str(DEFAULT_MAX_CHUNK_SIZE)))

    @staticmethod
    def get_exclude_paths() -> list[str]:
        """Get path-substring exclusions from the comma-separated KB_EXCLUDE_PATHS."""
        raw = os.getenv("KB_EXCLUDE_PATHS", "")
        return [item.strip() for item in raw.split(",") if item.strip()]

    @staticmethod
    def get_ingest_workers() -> int:
        """Get the bulk-ingest worker count (default: 1, sequential)."""
        return max(1, int(os.getenv("KB_INGEST_WORKERS", str(DEFAULT_INGEST_WORKERS))))

    @staticmethod
    def get_replace_on_update() -> bool:
        """Whether incremental updates replace a file's earlier chunks (default: false)."""
        return _parse_bool(os.getenv("KB_REPLACE_ON_UPDATE"))


@dataclass
class IngestOptions:
    """Resolved settings shared by the ingestor and the incremental updater."""

    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    exclude_paths: list[str] = field(default_factory=list)
    workers: int = DEFAULT_INGEST_WORKERS
    replace_on_update: bool = False

    def __post_init__(self) -> None:
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")

    @classmethod
    def from_env(cls) -> "IngestOptions":
        """Build options from environment variables via KnowledgeBaseConfig."""
        options = cls(
            max_chunk_size=KnowledgeBaseConfig.get_max_chunk_size(),
            exclude_paths=KnowledgeBaseConfig.get_exclude_paths(),
            workers=KnowledgeBaseConfig.get_ingest_workers(),
            replace_on_update=KnowledgeBaseConfig.get_replace_on_update(),
        )
        logger.debug(f"Ingest options: {options}")
        return options
