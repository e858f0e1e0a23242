"""Tests for frontmatter and filename utilities."""

from firedocs.utils.markdown import add_frontmatter, parse_frontmatter, sanitize_name, slugify_segment


def test_add_frontmatter():
    """Test adding YAML frontmatter."""
    markdown = "# Test Content"
    metadata = {"title": "Test", "url": "https://example.com", "scrapeDate": "2026-01-01T00:00:00+00:00"}

    result = add_frontmatter(markdown, metadata)

    # Should start with ---
    assert result.startswith("---\n")

    # Values are double-quoted, keys are not, order is preserved
    assert result.split("\n")[1:4] == [
        'title: "Test"',
        'url: "https://example.com"',
        'scrapeDate: "2026-01-01T00:00:00+00:00"',
    ]

    # Should end with original content
    assert result.endswith("---\n\n# Test Content")


def test_add_frontmatter_drops_none_values():
    result = add_frontmatter("body", {"title": None, "url": "https://example.com"})

    assert "title" not in result
    assert 'url: "https://example.com"' in result


def test_frontmatter_round_trip_with_awkward_title():
    title = 'Config: "advanced" options # really'
    document = add_frontmatter("# Body\n\nText", {"title": title, "url": "https://example.com/a?b=c"})

    metadata, body = parse_frontmatter(document)

    assert metadata == {"title": title, "url": "https://example.com/a?b=c"}
    assert body == "# Body\n\nText"


def test_parse_frontmatter_without_block():
    assert parse_frontmatter("# Just markdown") == ({}, "# Just markdown")


def test_slugify_segment():
    assert slugify_segment("getting started") == "getting_started"
    assert slugify_segment("v1.2-beta_3") == "v1.2-beta_3"
    assert slugify_segment("a?b=c&d") == "a_b_c_d"
    assert slugify_segment("..") == "_"
    assert slugify_segment("") == "_"


def test_sanitize_name():
    assert sanitize_name("docs.example.com") == "docs_example_com"
    assert sanitize_name("my-site.io") == "my_site_io"
