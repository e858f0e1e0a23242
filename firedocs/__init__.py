"""Scrape documentation sites to markdown through the FireCrawl API."""

__version__ = "0.1.0"
