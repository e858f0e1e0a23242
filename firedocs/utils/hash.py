"""Content hashing for the crawl report."""

import hashlib


def compute_hash(content: str | bytes) -> str:
    """
    Compute SHA-256 hash of page content.

    Recorded per page in the crawl report so two runs can be compared
    without diffing the markdown files.

    Args:
        content: Markdown (str) or raw bytes

    Returns:
        Hexadecimal hash string (64 characters)

    Examples:
        >>> compute_hash("")
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    return hashlib.sha256(content).hexdigest()
