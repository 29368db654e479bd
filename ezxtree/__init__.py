"""A small, forgiving XML parser, element tree and serializer, with a bible-site builder."""

__version__ = "0.1.0"
__all__ = ["element", "entities", "parser", "serializer", "cli", "bible_site"]