"""Command-line interface for DocWatch using Click."""

import time
from dataclasses import replace
from pathlib import Path

import click
import requests
from dotenv import load_dotenv

from docwatch.client.cli_helpers import build_store, format_search_result, format_stats, load_store
from docwatch.constants import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_TOP_K
from docwatch.knowledge import (
    ContentType,
    ContextRetriever,
    IncrementalUpdater,
    IngestOptions,
    KnowledgeBaseConfig,
    RepositoryIngestor,
    initialize_knowledge_base,
)
from docwatch.llm import get_llm_service
from docwatch.service.agent import DocUpdateAgent
from docwatch.service.github import CommitSource

# Load environment variables
load_dotenv()

CONTENT_TYPE_CHOICES = [t.value for t in ContentType] + ["all"]


def _kb_path_option(func):
    return click.option(
        "--kb-path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Knowledge base snapshot (default: from KNOWLEDGE_BASE_PATH env or data/<repo>-knowledge.json)",
    )(func)


def _embedding_model_option(func):
    return click.option(
        "--embedding-model",
        type=str,
        default=None,
        help="Embedding model to use (default: from EMBEDDING_MODEL env or the service default)",
    )(func)


@click.command()
@click.argument(
    "repo_path",
    required=False,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@_kb_path_option
@_embedding_model_option
@click.option("--max-chunk-size", type=int, default=None, help="Split files larger than this (default: 8000)")
@click.option("--workers", type=int, default=None, help="Number of files embedded in parallel (default: 1)")
@click.option("--exclude", "exclude_paths", multiple=True, help="Skip files whose path contains this text")
def ingest(
    repo_path: Path | None,
    kb_path: Path | None,
    embedding_model: str | None,
    max_chunk_size: int | None,
    workers: int | None,
    exclude_paths: tuple[str, ...],
) -> None:
    """Build the knowledge base from the repository at REPO_PATH.

    The existing snapshot, if any, is replaced.

    Example:
        docwatch-ingest repos/my-sdk
        docwatch-ingest repos/my-sdk --exclude generated/ --workers 4
    """
    repo_path = repo_path or KnowledgeBaseConfig.get_repo_path()
    kb_path = kb_path or KnowledgeBaseConfig.get_knowledge_base_path()

    options = IngestOptions.from_env()
    try:
        options = replace(
            options,
            max_chunk_size=options.max_chunk_size if max_chunk_size is None else max_chunk_size,
            workers=options.workers if workers is None else workers,
            exclude_paths=options.exclude_paths + list(exclude_paths),
        )
    except ValueError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()

    click.echo(f"📂 Ingesting {repo_path}")
    click.echo(f"   Snapshot: {kb_path}\n")

    store = build_store(embedding_model)
    try:
        stats = RepositoryIngestor(store, options).ingest(repo_path)
    except FileNotFoundError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()

    click.echo(f"  ✓ Files: {stats.files}")
    click.echo(f"  ✓ Chunks: {stats.chunks}")
    for type_name, file_count in sorted(stats.by_type.items()):
        click.echo(f"    {type_name}: {file_count} file(s)")
    if stats.skipped:
        click.echo(f"  ⏭ Skipped: {stats.skipped}")
    if stats.errors:
        click.echo(f"  ✗ Errors: {stats.errors}", err=True)
        if not stats.files:
            click.echo("\nNo file could be ingested. Please ensure the embedding service is running.", err=True)
            raise click.Abort()

    if store.persist(kb_path):
        click.echo(f"\n✓ Ingestion complete! Saved {len(store)} chunks to {kb_path}")
    else:
        click.echo("\nNo chunks to store.")


@click.command()
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Repository working tree (default: from REPO_PATH env)",
)
@_kb_path_option
@_embedding_model_option
def update(
    paths: tuple[str, ...],
    repo_path: Path | None,
    kb_path: Path | None,
    embedding_model: str | None,
) -> None:
    """Re-ingest the changed repository-relative PATHS into the knowledge base.

    Example:
        docwatch-update src/client.ts docs/intro.md
    """
    repo_path = repo_path or KnowledgeBaseConfig.get_repo_path()
    kb_path = kb_path or KnowledgeBaseConfig.get_knowledge_base_path()

    store = load_store(kb_path, embedding_model)
    updater = IncrementalUpdater(store, repo_path, IngestOptions.from_env())

    appended = updater.ingest_changes(list(paths))
    if not appended:
        click.echo("No changes to the knowledge base.")
        return

    store.persist(kb_path)
    click.echo(f"✓ Added {appended} chunk(s), knowledge base now holds {len(store)}")


@click.command()
@click.argument("query", type=str)
@click.option("--top-k", type=int, default=DEFAULT_TOP_K, help="Number of results to return (default: 5)")
@click.option(
    "--type",
    "type_name",
    type=click.Choice(CONTENT_TYPE_CHOICES),
    default=ContentType.CODE.value,
    help="Only return chunks of this content type (default: code)",
)
@_kb_path_option
@_embedding_model_option
def search(
    query: str, top_k: int, type_name: str, kb_path: Path | None, embedding_model: str | None
) -> None:
    """Search the knowledge base for chunks similar to QUERY.

    Example:
        docwatch-search "webhook signature"
        docwatch-search "install" --type documentation --top-k 3
    """
    kb_path = kb_path or KnowledgeBaseConfig.get_knowledge_base_path()
    store = load_store(kb_path, embedding_model)

    click.echo(f"🔍 Searching for: '{query}'")
    click.echo(f"   Returning top {top_k} results...\n")

    type_filter = None if type_name == "all" else ContentType(type_name)
    try:
        results = ContextRetriever(store).search(query, top_k=top_k, type_filter=type_filter)
    except ConnectionError as e:
        click.echo(f"✗ Connection error: {e}", err=True)
        click.echo("\nPlease ensure the embedding service is running.", err=True)
        raise click.Abort()
    except ValueError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()

    if not results:
        click.echo("No results found.")
        return

    click.echo(f"✅ Found {len(results)} result(s):\n")
    for i, (chunk, score) in enumerate(results, 1):
        click.echo(format_search_result(i, chunk, score))


@click.command()
@_kb_path_option
def count(kb_path: Path | None) -> None:
    """Show the number of chunks in the knowledge base.

    Example:
        docwatch-count
    """
    kb_path = kb_path or KnowledgeBaseConfig.get_knowledge_base_path()
    store = load_store(kb_path)
    click.echo(format_stats(store.stats()))


@click.command()
@click.option(
    "--interval",
    type=int,
    default=DEFAULT_POLL_INTERVAL_SECONDS,
    help="Seconds between polls (default: 300)",
)
@click.option("--once", is_flag=True, default=False, help="Poll a single time and exit")
def watch(interval: int, once: bool) -> None:
    """Poll the monitored repository and open documentation PRs for new commits.

    Example:
        docwatch-watch
        docwatch-watch --interval 60
    """
    llm_service = get_llm_service()
    store = build_store()
    options = IngestOptions.from_env()
    try:
        agent = DocUpdateAgent.from_env(store, llm_service, options)
    except ValueError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()

    outcome = initialize_knowledge_base(
        RepositoryIngestor(store, options), agent.updater.repo_path, agent.kb_path
    )
    click.echo(f"🧠 Knowledge base {outcome} ({len(store)} chunks)")

    settings = agent.settings
    source = CommitSource(agent.github, settings.monitor_owner, settings.monitor_repo, settings.monitor_branch)
    click.echo(f"👀 Watching {settings.monitor_owner}/{settings.monitor_repo} every {interval}s")

    while True:
        try:
            commit = source.poll()
            if commit is None:
                click.echo("No new commits.")
            else:
                title = commit.message.splitlines()[0] if commit.message else ""
                click.echo(f"📥 New commit {commit.sha[:7]}: {title}")
                url = agent.process_commit(commit)
                if url:
                    click.echo(f"  ✓ Opened documentation PR: {url}")
                else:
                    click.echo("  No documentation changes needed.")
        except requests.RequestException as e:
            click.echo(f"  ✗ GitHub error: {e}", err=True)

        if once:
            return
        time.sleep(interval)
