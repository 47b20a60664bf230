"""Schema-grounded natural language to PostgreSQL generation."""

__all__ = ["__version__"]

__version__ = "0.1.0"
