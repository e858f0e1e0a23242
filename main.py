"""Scrape a documentation site into markdown files.

Just run: uv run python main.py https://docs.example.com
"""

from firedocs.cli import run

if __name__ == "__main__":
    run()
