"""Notion content normalization pipeline for a portfolio site."""

__version__ = "1.0.0"
