"""Configuration for the monitored and documentation repositories."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from docwatch.constants import DEFAULT_GITHUB_API_URL

load_dotenv()


class GitHubConfig:
    """Configuration class for GitHub access and repository coordinates."""

    @staticmethod
    def get_token() -> str:
        return os.getenv("GITHUB_TOKEN", "")

    @staticmethod
    def get_webhook_secret() -> str:
        return os.getenv("GITHUB_WEBHOOK_SECRET", "")

    @staticmethod
    def get_api_url() -> str:
        """Get the GitHub REST API base URL (default: https://api.github.com)."""
        return os.getenv("GITHUB_API_URL", DEFAULT_GITHUB_API_URL)


@dataclass
class AgentSettings:
    """Repository coordinates the documentation agent works between.

    Attributes:
        monitor_owner: Owner of the source repository being watched
        monitor_repo: Name of the source repository being watched
        docs_owner: Owner of the documentation repository
        docs_repo: Name of the documentation repository
        docs_base_path: Directory inside the docs repository holding the pages
        monitor_branch: Branch polled in watch mode (None = default branch)
    """

    monitor_owner: str
    monitor_repo: str
    docs_owner: str
    docs_repo: str
    docs_base_path: str = ""
    monitor_branch: str | None = None

    @classmethod
    def from_env(cls) -> "AgentSettings":
        """Read repository coordinates from environment variables.

        Raises:
            ValueError: If any required owner or name is missing
        """
        settings = cls(
            monitor_owner=os.getenv("MONITOR_REPO_OWNER", ""),
            monitor_repo=os.getenv("MONITOR_REPO_NAME", ""),
            docs_owner=os.getenv("DOCS_REPO_OWNER", ""),
            docs_repo=os.getenv("DOCS_REPO_NAME", ""),
            docs_base_path=os.getenv("DOCS_BASE_PATH", ""),
            monitor_branch=os.getenv("MONITOR_BRANCH") or None,
        )
        if not settings.monitor_owner or not settings.monitor_repo:
            raise ValueError("Monitor repository owner and name are required")
        if not settings.docs_owner or not settings.docs_repo:
            raise ValueError("Documentation repository owner and name are required")
        return settings
