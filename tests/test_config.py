"""Tests for environment-driven configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from docwatch.constants import get_embedding_model
from docwatch.knowledge import IngestOptions, KnowledgeBaseConfig
from docwatch.service.config import AgentSettings, GitHubConfig


class TestKnowledgeBaseConfig:
    """Tests for KnowledgeBaseConfig."""

    def test_default_snapshot_path_uses_repo_name(self):
        with patch.dict(os.environ, {"MONITOR_REPO_NAME": "sdk"}, clear=True):
            assert KnowledgeBaseConfig.get_knowledge_base_path() == Path.cwd() / "data" / "sdk-knowledge.json"

    def test_explicit_snapshot_path(self, tmp_path):
        with patch.dict(os.environ, {"KNOWLEDGE_BASE_PATH": str(tmp_path / "kb.json")}, clear=True):
            assert KnowledgeBaseConfig.get_knowledge_base_path() == tmp_path / "kb.json"

    def test_repo_path_prefers_env(self, tmp_path):
        with patch.dict(os.environ, {"REPO_PATH": str(tmp_path)}, clear=True):
            assert KnowledgeBaseConfig.get_repo_path() == tmp_path

    def test_exclude_paths_are_split_and_trimmed(self):
        with patch.dict(os.environ, {"KB_EXCLUDE_PATHS": " generated/ , ,fixtures/"}, clear=True):
            assert KnowledgeBaseConfig.get_exclude_paths() == ["generated/", "fixtures/"]

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("no", False), ("", False)])
    def test_replace_on_update_flag(self, value, expected):
        with patch.dict(os.environ, {"KB_REPLACE_ON_UPDATE": value}, clear=True):
            assert KnowledgeBaseConfig.get_replace_on_update() is expected


class TestIngestOptions:
    """Tests for IngestOptions."""

    def test_from_env(self):
        env = {"MAX_CHUNK_SIZE": "4000", "KB_INGEST_WORKERS": "3", "KB_EXCLUDE_PATHS": "vendor/"}
        with patch.dict(os.environ, env, clear=True):
            options = IngestOptions.from_env()

        assert options.max_chunk_size == 4000
        assert options.workers == 3
        assert options.exclude_paths == ["vendor/"]
        assert options.replace_on_update is False

    def test_defaults(self):
        options = IngestOptions()
        assert options.max_chunk_size == 8000
        assert options.workers == 1

    @pytest.mark.parametrize("kwargs", [{"max_chunk_size": 0}, {"workers": 0}])
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            IngestOptions(**kwargs)


class TestAgentSettings:
    """Tests for AgentSettings and GitHubConfig."""

    def test_from_env(self):
        env = {
            "MONITOR_REPO_OWNER": "acme",
            "MONITOR_REPO_NAME": "sdk",
            "DOCS_REPO_OWNER": "acme",
            "DOCS_REPO_NAME": "docs",
            "DOCS_BASE_PATH": "content",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = AgentSettings.from_env()

        assert settings == AgentSettings("acme", "sdk", "acme", "docs", "content", None)

    def test_missing_repositories_raise(self):
        with patch.dict(os.environ, {"MONITOR_REPO_OWNER": "acme"}, clear=True):
            with pytest.raises(ValueError):
                AgentSettings.from_env()

    def test_github_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert GitHubConfig.get_api_url() == "https://api.github.com"
            assert GitHubConfig.get_token() == ""


class TestEmbeddingModel:
    """Tests for get_embedding_model."""

    def test_env_override(self):
        with patch.dict(os.environ, {"EMBEDDING_MODEL": "mxbai-embed-large"}, clear=True):
            assert get_embedding_model("gemini") == "mxbai-embed-large"

    def test_service_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_embedding_model() == "nomic-embed-text"
            assert get_embedding_model("gemini") == "text-embedding-004"
