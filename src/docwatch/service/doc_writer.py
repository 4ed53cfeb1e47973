"""LLM-driven selection and drafting of documentation updates."""

import logging
import re
from dataclasses import dataclass

from docwatch.llm.base import LLMService
from docwatch.service import prompts
from docwatch.service.github import DocFile, FileChange, generate_directory_tree

logger = logging.getLogger(__name__)

DEFAULT_PR_TITLE = "Documentation Updates"
DEFAULT_PR_BODY = "Updates to documentation based on recent code changes."
DOC_PREVIEW_LINES = 5

TITLE_RE = re.compile(r"Title:\s*(.+)")
DESCRIPTION_RE = re.compile(r"Description:\s*([\s\S]+)")


@dataclass
class DocUpdate:
    """Drafted replacement content for one documentation page."""

    path: str
    content: str
    summary: str


def format_changes(changes: list[FileChange]) -> str:
    return "\n\n".join(
        f"File: {change.filename}\n"
        f"Additions: {change.additions}\n"
        f"Deletions: {change.deletions}\n"
        f"Patch: {change.patch or 'No patch available'}"
        for change in changes
    )


def _context_block(context: str | None) -> str:
    if not context:
        return ""
    return f"\nHere is relevant context from the code knowledge base:\n{context}\n"


def parse_pull_request_content(text: str) -> tuple[str, str]:
    """Extract (title, body) from a "Title: ... Description: ..." response.

    Missing parts fall back to generic defaults.
    """
    title_match = TITLE_RE.search(text)
    title = title_match.group(1).strip() if title_match else DEFAULT_PR_TITLE
    body_match = DESCRIPTION_RE.search(text)
    body = body_match.group(1).strip() if body_match else DEFAULT_PR_BODY
    return title, body


class DocWriter:
    """Asks the language model which pages to change and how."""

    def __init__(self, llm: LLMService) -> None:
        self.llm = llm

    async def _ask(self, system: str, prompt: str) -> str:
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]
        return (await self.llm.generate_response(messages)).strip()

    async def find_relevant_docs(
        self,
        changes: list[FileChange],
        commit_message: str,
        docs: list[DocFile],
        context: str | None = None,
    ) -> list[DocFile]:
        """Pick the documentation pages affected by ``changes``.

        Only paths that exist in ``docs`` are returned, in the model's order.
        """
        doc_listing = "\n\n".join(
            f"Path: {doc.path}\nFirst few lines:\n"
            + "\n".join(doc.content.splitlines()[:DOC_PREVIEW_LINES])
            for doc in docs
        )
        analysis = await self._ask(
            prompts.FIND_RELEVANT_DOCS_SYSTEM,
            prompts.FIND_RELEVANT_DOCS_PROMPT.format(
                changes=format_changes(changes),
                commit_message=commit_message,
                context=_context_block(context),
                tree=generate_directory_tree(docs),
                docs=doc_listing,
            ),
        )

        by_path = {doc.path: doc for doc in docs}
        selected: list[DocFile] = []
        for line in analysis.splitlines():
            path = line.strip().strip("-*` ").strip()
            if path in by_path and by_path[path] not in selected:
                selected.append(by_path[path])

        logger.info(f"📋 Found {len(selected)} documentation files to update")
        return selected

    async def generate_documentation_updates(
        self,
        changes: list[FileChange],
        commit_messages: list[str],
        docs: list[DocFile],
        context: str | None = None,
    ) -> list[DocUpdate]:
        """Draft new content for each page; pages the model leaves unchanged are dropped."""
        updates: list[DocUpdate] = []
        for doc in docs:
            updated = await self._ask(
                prompts.UPDATE_DOC_SYSTEM,
                prompts.UPDATE_DOC_PROMPT.format(
                    changes=format_changes(changes),
                    commit_messages="\n".join(commit_messages),
                    context=_context_block(context),
                    path=doc.path,
                    content=doc.content,
                ),
            )
            if not updated or updated == doc.content.strip():
                logger.info(f"No changes drafted for {doc.path}")
                continue

            summary = await self._ask(
                prompts.SUMMARIZE_DOC_CHANGE_SYSTEM,
                prompts.SUMMARIZE_DOC_CHANGE_PROMPT.format(
                    path=doc.path, original=doc.content, updated=updated
                ),
            )
            updates.append(DocUpdate(path=doc.path, content=updated, summary=summary))
        return updates

    async def generate_pull_request_content(self, updates: list[DocUpdate]) -> tuple[str, str]:
        """Produce a (title, body) pair describing ``updates``."""
        listing = "\n\n".join(
            f"Path: {update.path}\nSummary of changes: {update.summary}" for update in updates
        )
        text = await self._ask(
            prompts.PULL_REQUEST_SYSTEM, prompts.PULL_REQUEST_PROMPT.format(updates=listing)
        )
        return parse_pull_request_content(text)

    async def generate_code_summary(self, changes: list[FileChange], context: str) -> str:
        return await self._ask(
            prompts.CODE_SUMMARY_SYSTEM,
            prompts.CODE_SUMMARY_PROMPT.format(changes=format_changes(changes), context=context),
        )
