"""LingoSpark: AI-assisted vocabulary notebook and flashcards."""

__version__ = "0.1.0"
