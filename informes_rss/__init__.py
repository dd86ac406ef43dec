"""Scraper and RSS feed maintainer for NF-e informe notices."""

__version__ = "1.0.0"
