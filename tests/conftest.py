"""Shared fixtures for building throwaway content trees."""

import json
from pathlib import Path

import pytest


def write_post(blog_dir: Path, rel_path: str, frontmatter: dict[str, str], body: str = "Body text.") -> Path:
    path = blog_dir / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["---"] + [f"{key}: {value}" for key, value in frontmatter.items()] + ["---", "", body, ""]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """A content tree with two listed posts and one unlisted draft."""
    root = tmp_path / "content"
    blog_dir = root / "blog"
    write_post(blog_dir, "a/index.md", {"title": "A", "date": "2021-03-03", "listed": "true"})
    write_post(blog_dir, "b/index.md", {"title": "B", "date": "2020-01-01", "listed": "false"})
    write_post(blog_dir, "C/index.mdx", {"title": "C", "date": "2021-05-01"}, body="## Intro\n\nSee [home](/).")
    site = {
        "site_name": "Test Person",
        "site_tagline": "Writes things",
        "intro": "Hi there!",
        "sections": [
            {"title": "Blog", "link": "/blog", "body": "Read [my blog](/blog)."},
            {"title": "Life", "body": "I live in a city."},
        ],
        "places": [{"image": "missing.jpeg", "caption": "New York City", "years": "2015–Present"}],
    }
    (root / "site.json").write_text(json.dumps(site), encoding="utf-8")
    return root
