"""DocWatch: keeps documentation in step with code through an incremental knowledge base."""

__version__ = "0.1.0"
