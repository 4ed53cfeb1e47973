"""Documentation update agent: from repository events to documentation pull requests."""

import logging
import os
import threading
from pathlib import Path
from typing import Any

from docwatch.constants import CODE_EXTENSIONS
from docwatch.knowledge import (
    ContentType,
    ContextRetriever,
    IncrementalUpdater,
    IngestOptions,
    KnowledgeBaseConfig,
    KnowledgeStore,
    is_empty_context,
)
from docwatch.knowledge.utils import file_extension
from docwatch.llm.base import LLMService
from docwatch.service.async_utils import run_async
from docwatch.service.config import AgentSettings, GitHubConfig
from docwatch.service.doc_writer import DocWriter
from docwatch.service.github import Commit, FileChange, FileUpdate, GitHubClient
from docwatch.service.webhook import extract_push_changed_files, is_monitored_repository

logger = logging.getLogger(__name__)

ZERO_SHA = "0" * 40
TEST_MARKERS = ("/test/", "/tests/", "/__tests__/", ".test.", ".spec.")
PUBLIC_API_MARKERS = ("provider", "interface", "public", "exports", "/src/")


def is_documentable_change(filename: str) -> bool:
    """True for code files that are not tests and plausibly part of the public API."""
    lowered = filename.lower()
    if file_extension(filename) not in CODE_EXTENSIONS:
        return False
    if any(marker in lowered for marker in TEST_MARKERS) or Path(lowered).name.startswith("test_"):
        return False
    return any(marker in lowered for marker in PUBLIC_API_MARKERS) or "internal" not in lowered


class DocUpdateAgent:
    """Reacts to pushes and merged pull requests on the monitored repository.

    Each event refreshes the knowledge base with the changed files, then the
    commit is analysed and, when documentation is affected, a pull request
    is opened on the documentation repository. Events are handled one at a
    time.
    """

    def __init__(
        self,
        updater: IncrementalUpdater,
        retriever: ContextRetriever,
        github: GitHubClient,
        writer: DocWriter,
        settings: AgentSettings,
        kb_path: str | os.PathLike,
    ) -> None:
        self.updater = updater
        self.store = updater.store
        self.retriever = retriever
        self.github = github
        self.writer = writer
        self.settings = settings
        self.kb_path = Path(kb_path)
        self._event_lock = threading.Lock()

    @classmethod
    def from_env(
        cls, store: KnowledgeStore, llm: LLMService, options: IngestOptions | None = None
    ) -> "DocUpdateAgent":
        """Build an agent over ``store`` using environment configuration.

        Raises:
            ValueError: If repository coordinates or the GitHub token are missing
        """
        options = options or IngestOptions.from_env()
        return cls(
            updater=IncrementalUpdater(store, KnowledgeBaseConfig.get_repo_path(), options),
            retriever=ContextRetriever(store),
            github=GitHubClient(token=GitHubConfig.get_token(), api_url=GitHubConfig.get_api_url()),
            writer=DocWriter(llm),
            settings=AgentSettings.from_env(),
            kb_path=KnowledgeBaseConfig.get_knowledge_base_path(),
        )

    def dispatch(self, event: str, payload: dict[str, Any]) -> str:
        """Handle one webhook delivery synchronously.

        Returns:
            str: "processed" or "ignored"
        """
        with self._event_lock:
            if event == "push":
                return run_async(self.handle_push(payload))
            if event == "pull_request":
                return run_async(self.handle_pull_request(payload))
            logger.info(f"Ignoring unsupported event '{event}'")
            return "ignored"

    def update_knowledge_base(self, changed_files: list[str]) -> bool:
        """Re-ingest changed files and persist the store if anything was appended."""
        if not changed_files:
            return False
        updated = self.updater.update(changed_files)
        if updated:
            self.store.persist(self.kb_path)
            logger.info("✅ Knowledge base updated and saved")
        return updated

    async def handle_push(self, payload: dict[str, Any]) -> str:
        if not is_monitored_repository(payload, self.settings.monitor_owner, self.settings.monitor_repo):
            full_name = (payload.get("repository") or {}).get("full_name")
            logger.info(f"⚠️ Push from unmonitored repository {full_name}, skipping")
            return "ignored"

        after = payload.get("after")
        if payload.get("deleted") or not after or after == ZERO_SHA:
            logger.info("Branch deletion push, nothing to process")
            return "ignored"

        changed_files = extract_push_changed_files(payload)
        logger.info(f"📥 Push with {len(changed_files)} changed files")
        self.update_knowledge_base(changed_files)
        await self.process(after)
        return "processed"

    async def handle_pull_request(self, payload: dict[str, Any]) -> str:
        pull = payload.get("pull_request") or {}
        if payload.get("action") != "closed" or not pull.get("merged"):
            return "ignored"
        if not is_monitored_repository(payload, self.settings.monitor_owner, self.settings.monitor_repo):
            return "ignored"

        number = pull.get("number")
        logger.info(f"📥 Processing merged PR #{number}")
        changed_files = self.github.list_pull_request_files(
            self.settings.monitor_owner, self.settings.monitor_repo, number
        )
        self.update_knowledge_base(changed_files)

        merge_sha = pull.get("merge_commit_sha")
        if merge_sha:
            await self.process(merge_sha)
        return "processed"

    async def process(self, ref: str) -> str | None:
        """Analyse commit ``ref`` and open a documentation pull request if needed.

        Returns:
            str | None: URL of the opened pull request, or None if nothing changed
        """
        settings = self.settings
        commit = self.github.get_commit(settings.monitor_owner, settings.monitor_repo, ref)

        code_changes: list[FileChange] = [f for f in commit.files if is_documentable_change(f.filename)]
        if not code_changes:
            logger.info("📭 No relevant code changes")
            return None

        filenames = ", ".join(change.filename for change in code_changes)
        logger.info(f"📋 Analyzing {len(code_changes)} changed code files")

        context = self.retriever.retrieve(
            f"Code context for changes in {filenames}", type_filter=ContentType.CODE
        )
        usable_context = None if is_empty_context(context) else context

        docs = self.github.get_docs_content(settings.docs_owner, settings.docs_repo, settings.docs_base_path)
        if not docs:
            logger.warning("⚠️ No documentation files found, skipping")
            return None
        logger.info(f"📚 Loaded {len(docs)} documentation files")

        relevant = await self.writer.find_relevant_docs(code_changes, commit.message, docs, usable_context)
        if not relevant:
            logger.info("📭 No documentation affected")
            return None

        updates = await self.writer.generate_documentation_updates(
            code_changes, [commit.message], relevant, usable_context
        )
        if not updates:
            logger.info("📭 Model proposed no documentation changes")
            return None

        title, body = await self.writer.generate_pull_request_content(updates)
        if usable_context:
            summary = await self.writer.generate_code_summary(code_changes, usable_context)
            body = f"{body}\n\n## Code changes\n\n{summary}"

        return self.github.open_pull_request(
            settings.docs_owner,
            settings.docs_repo,
            [FileUpdate(path=update.path, content=update.content) for update in updates],
            title,
            body,
        )

    def process_commit(self, commit: Commit) -> str | None:
        """Refresh the knowledge base for a polled commit and process it.

        Returns:
            str | None: URL of the opened pull request, if any
        """
        with self._event_lock:
            self.update_knowledge_base([change.filename for change in commit.files])
            return run_async(self.process(commit.sha))
