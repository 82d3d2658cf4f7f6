"""Lexicon-Crawler: harvest headwords and grammatical categories from an online dictionary."""

__version__ = "0.1.0"
