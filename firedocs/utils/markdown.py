"""Frontmatter and filename helpers for markdown output."""

import re
from typing import Any

import yaml

UNSAFE_SEGMENT_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


class QuotedString(str):
    """String that is always emitted as a double-quoted YAML scalar."""


class FrontmatterDumper(yaml.SafeDumper):
    """SafeDumper that quotes QuotedString values but leaves keys plain."""


def _represent_quoted(dumper: yaml.SafeDumper, data: QuotedString) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style='"')


FrontmatterDumper.add_representer(QuotedString, _represent_quoted)


def add_frontmatter(markdown: str, metadata: dict[str, Any]) -> str:
    """
    Add YAML frontmatter to markdown document.

    String values are double-quoted so titles containing ``:`` or ``#``
    and ISO timestamps survive a round trip as plain strings.

    Args:
        markdown: Markdown content
        metadata: Ordered frontmatter fields; None values are dropped

    Returns:
        Markdown with YAML frontmatter

    Example:
        >>> print(add_frontmatter("# Hello", {"title": "Test", "url": "https://example.com"}))
        ---
        title: "Test"
        url: "https://example.com"
        ---
        <BLANKLINE>
        # Hello
    """
    fields = {
        key: QuotedString(value) if isinstance(value, str) else value
        for key, value in metadata.items()
        if value is not None
    }
    yaml_content = yaml.dump(
        fields,
        Dumper=FrontmatterDumper,
        allow_unicode=True,
        sort_keys=False,
        width=float("inf"),
    )
    return f"---\n{yaml_content}---\n\n{markdown}"


def parse_frontmatter(document: str) -> tuple[dict[str, Any], str]:
    """
    Split a document written by add_frontmatter into (metadata, body).

    Documents without frontmatter return an empty dict and the full text.
    """
    if not document.startswith("---\n"):
        return {}, document

    end = document.find("\n---\n", 4)
    if end == -1:
        return {}, document

    metadata = yaml.safe_load(document[4:end]) or {}
    body = document[end + len("\n---\n") :]
    return metadata, body.removeprefix("\n")


def slugify_segment(segment: str) -> str:
    """
    Make one URL path segment safe to use as a file or directory name.

    Examples:
        >>> slugify_segment("getting started")
        'getting_started'
        >>> slugify_segment("..")
        '_'
    """
    slug = UNSAFE_SEGMENT_CHARS.sub("_", segment).strip("_") or "_"
    # Never produce "." or ".." path components
    if set(slug) == {"."}:
        return "_"
    return slug


def sanitize_name(name: str) -> str:
    """
    Replace every non-alphanumeric character with an underscore.

    Examples:
        >>> sanitize_name("docs.example.com")
        'docs_example_com'
    """
    return NON_ALPHANUMERIC.sub("_", name)
