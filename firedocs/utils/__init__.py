"""Utility functions for logging, hashing, retries and markdown output."""

from firedocs.utils.hash import compute_hash
from firedocs.utils.logger import get_logger, log_event
from firedocs.utils.markdown import add_frontmatter, parse_frontmatter, slugify_segment

__all__ = [
    "compute_hash",
    "get_logger",
    "log_event",
    "add_frontmatter",
    "parse_frontmatter",
    "slugify_segment",
]
