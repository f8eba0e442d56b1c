#!/usr/bin/env python3
from __future__ import annotations

import re
import urllib.parse
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
SITE_DIR = BASE_DIR / "site"
PREFIX = "[site]"

HREF_PATTERN = re.compile(r'(?:href|src)=["\']([^"\']+)["\']', re.IGNORECASE)


def _is_internal_link(url: str) -> bool:
    """Checks if the URL is an internal link that should be verified."""
    if url.startswith(("http://", "https://", "mailto:", "#", "tel:")):
        return False
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme:
        return False
    return True


def _check_target_exists(site_dir: Path, source_file: Path, url: str) -> bool:
    """
    Checks if the target file exists.
    Absolute paths resolve against the site root, everything else against
    the linking page. Query strings and fragments are ignored.
    """
    url_clean = url.split("?")[0].split("#")[0]
    if not url_clean:
        return True

    if url_clean.startswith("/"):
        target_path = site_dir / url_clean.lstrip("/")
    else:
        target_path = source_file.parent / url_clean

    # Directory URLs are served through their index.html.
    if target_path.is_dir():
        return (target_path / "index.html").exists()
    return target_path.exists()


def find_broken_links(site_dir: Path) -> list[tuple[Path, str]]:
    broken_links: list[tuple[Path, str]] = []
    for path in sorted(site_dir.rglob("*.html")):
        text = path.read_text(encoding="utf-8", errors="ignore")
        for url in HREF_PATTERN.findall(text):
            url = url.strip()
            if _is_internal_link(url) and not _check_target_exists(site_dir, path, url):
                broken_links.append((path, url))
    return broken_links


def main() -> int:
    if not SITE_DIR.exists():
        print(f"{PREFIX} site/ directory not found. Run python3 tools/build_site.py first.")
        return 1

    broken_links = find_broken_links(SITE_DIR)
    if broken_links:
        print(f"{PREFIX} Broken internal links found:")
        for path, url in broken_links:
            rel = path.relative_to(SITE_DIR)
            print(f"  {rel}: {url}")
        return 1

    print(f"{PREFIX} Link verification passed. No broken internal links found.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
