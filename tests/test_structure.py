"""Tests for the docwatch package structure."""


def test_package_imports():
    """Test that main package can be imported."""
    import docwatch
    assert docwatch.__version__ == "0.1.0"


def test_knowledge_subpackage():
    """Test that the knowledge base subpackage exposes its components."""
    import docwatch.knowledge
    assert docwatch.knowledge.KnowledgeStore is not None


def test_service_subpackage():
    """Test that service subpackage exists."""
    import docwatch.service
    assert docwatch.service is not None


def test_client_subpackage():
    """Test that client subpackage exists."""
    import docwatch.client
    assert docwatch.client is not None
