#!/usr/bin/env python3
from __future__ import annotations

import html
import json
import os
import re
import shutil
from pathlib import Path
from typing import Any

from content_lister import DUPLICATE_POLICIES, ArticleSummary, ContentDocument, ContentError, list_entries
from content_loader import load_documents

# Robust Path Detection
SCRIPT_DIR = Path(__file__).resolve().parent
if (SCRIPT_DIR / "content").exists():
    BASE_DIR = SCRIPT_DIR
elif (SCRIPT_DIR.parent / "content").exists():
    BASE_DIR = SCRIPT_DIR.parent
elif (Path.cwd() / "content").exists():
    BASE_DIR = Path.cwd()
else:
    BASE_DIR = SCRIPT_DIR.parent

CONTENT_DIR = BASE_DIR / "content"
SITE_DIR = BASE_DIR / "site"
PREFIX = "[site]"

PLACEHOLDER_IMAGE = "placeholder-place.svg"

SITE_DEFAULTS: dict[str, Any] = {
    "site_name": "Personal Homepage",
    "site_tagline": "",
    "meta_description": "",
    "intro": "",
    "sections": [],
    "places": [],
    "blog_heading": "Blog",
    "duplicate_urls": "error",
}


def _escape(text: str) -> str:
    return html.escape(text or "", quote=True)


def _render_inline_markdown(text: str) -> str:
    escaped = _escape(text)
    escaped = re.sub(r"`([^`]+)`", r"<code>\1</code>", escaped)
    escaped = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", r'<a href="\2">\1</a>', escaped)
    escaped = re.sub(r"\*\*([^*]+)\*\*", r"<strong>\1</strong>", escaped)
    return re.sub(r"\*([^*]+)\*", r"<em>\1</em>", escaped)


def _render_markdown(text: str) -> str:
    lines = (text or "").replace("\r\n", "\n").splitlines()
    rendered: list[str] = []
    current_block: list[str] = []
    mode = None  # list, code, quote, None

    def flush() -> None:
        nonlocal mode, current_block
        if not current_block:
            mode = None
            return

        if mode == "code":
            code_text = _escape("\n".join(current_block))
            rendered.append(f"<pre><code>{code_text}</code></pre>")
        elif mode == "list":
            items = "".join(f"<li>{_render_inline_markdown(li)}</li>" for li in current_block)
            rendered.append(f"<ul>{items}</ul>")
        elif mode == "quote":
            quote_content = _render_markdown("\n".join(current_block))
            rendered.append(f"<blockquote>{quote_content}</blockquote>")
        else:
            block_text = " ".join(current_block)
            heading_match = re.match(r"^(#{1,6})\s+(.*)$", block_text)
            if heading_match:
                level = len(heading_match.group(1))
                tag = f"h{min(level + 1, 6)}"
                rendered.append(f"<{tag}>{_render_inline_markdown(heading_match.group(2))}</{tag}>")
            elif re.match(r"^---+$", block_text):
                rendered.append("<hr />")
            else:
                rendered.append(f"<p>{_render_inline_markdown(block_text)}</p>")

        current_block = []
        mode = None

    for line in lines:
        stripped = line.strip()

        if stripped.startswith("```"):
            if mode == "code":
                flush()
            else:
                flush()
                mode = "code"
            continue

        if mode == "code":
            current_block.append(line)
            continue

        if not stripped:
            flush()
            continue

        if stripped.startswith(("- ", "* ")):
            if mode != "list":
                flush()
            mode = "list"
            current_block.append(stripped[2:])
            continue

        if stripped.startswith(">"):
            if mode != "quote":
                flush()
            mode = "quote"
            current_block.append(stripped[1:].strip())
            continue

        if mode in ("list", "quote"):
            flush()

        current_block.append(stripped)

    flush()
    return "\n".join(rendered)


def _read_site_config(content_dir: Path) -> dict[str, Any]:
    site_json = content_dir / "site.json"
    if site_json.exists():
        config = json.loads(site_json.read_text(encoding="utf-8"))
    else:
        config = {}
    for key, val in SITE_DEFAULTS.items():
        if key not in config:
            config[key] = val
    if config["duplicate_urls"] not in DUPLICATE_POLICIES:
        raise SystemExit(f"{PREFIX} Unknown duplicate_urls policy in {site_json}: {config['duplicate_urls']!r}")
    return config


def _rel_link(current_path: Path, target_path: Path) -> str:
    current_dir = current_path.parent.as_posix()
    return os.path.relpath(target_path.as_posix(), start=current_dir)


def _url_output_path(url: str) -> Path:
    return Path(url.strip("/")) / "index.html"


def _render_head(title: str, description: str) -> str:
    return f"""
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{_escape(title)}</title>
  <meta name="description" content="{_escape(description)}" />
</head>
"""


def _render_header(site: dict[str, Any], current_slug: str) -> str:
    nav_links = []
    for slug, label in (("/", "Home"), ("/blog", "Blog")):
        active = "active" if slug == current_slug else ""
        nav_links.append(f"<a class=\"{active}\" href=\"{slug}\">{label}</a>")
    return f"""
<header class="site-header">
  <a class="logo" href="/">{_escape(str(site.get('site_name', '')))}</a>
  <nav class="nav">{''.join(nav_links)}</nav>
</header>
"""


def _render_page(site: dict[str, Any], title: str, current_slug: str, main_html: str) -> str:
    return f"""<!doctype html>
<html lang="en">
{_render_head(title, str(site.get('meta_description', '')))}
<body>
  <div class="page-shell">
    {_render_header(site, current_slug)}
    <main>
      {main_html}
    </main>
  </div>
</body>
</html>
"""


def _write_page(site_dir: Path, current_path: Path, doc: str) -> None:
    output_path = site_dir / current_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(doc, encoding="utf-8")


def _render_home_section(section: dict[str, str]) -> str:
    title = _escape(section.get("title", ""))
    link = (section.get("link") or "").strip()
    heading = f"<a href=\"{_escape(link)}\">{title}</a>" if link else title
    return f"""
      <section class="home-section">
        <h2>{heading}</h2>
        {_render_markdown(section.get('body', ''))}
      </section>"""


def _render_places(places: list[dict[str, str]], current_path: Path, available: set[str]) -> str:
    if not places:
        return ""
    figures = []
    for place in places:
        image = (place.get("image") or "").strip()
        if image not in available:
            image = PLACEHOLDER_IMAGE
        src = _rel_link(current_path, Path("assets/img") / image)
        caption = _escape(place.get("caption", ""))
        figures.append(
            f"""
        <figure class="place">
          <img src="{_escape(src)}" alt="{caption}" />
          <figcaption><p class="place-name">{caption}</p><p class="place-years">{_escape(place.get('years', ''))}</p></figcaption>
        </figure>"""
        )
    return "<div class=\"places\">" + "".join(figures) + "</div>"


def _render_home(site: dict[str, Any], available_images: set[str]) -> str:
    current_path = Path("index.html")
    sections_html = "".join(_render_home_section(section) for section in site.get("sections", []))
    main_html = f"""
      <section class="intro">
        <h1>{_escape(str(site.get('site_name', '')))}</h1>
        <p class="subtitle">{_escape(str(site.get('site_tagline', '')))}</p>
        {_render_markdown(str(site.get('intro', '')))}
      </section>
      {sections_html}
      {_render_places(site.get('places', []), current_path, available_images)}
"""
    return _render_page(site, str(site.get("site_name", "")), "/", main_html)


def _render_blog_index(site: dict[str, Any], articles: list[ArticleSummary]) -> str:
    heading = str(site.get("blog_heading") or "Blog")
    if not articles:
        list_html = "<p>No posts yet. Add an index.md to content/blog/&lt;slug&gt;/ to publish the first one.</p>"
    else:
        items = []
        for article in articles:
            items.append(
                """
        <li class="post-item">
          <p class="post-date">{date}</p>
          <a href="{href}"><h2>{title}</h2></a>
        </li>""".format(
                    date=_escape(article.display_date),
                    href=_escape(article.url),
                    title=_escape(article.title),
                )
            )
        list_html = "<ul class=\"post-list\">" + "".join(items) + "\n      </ul>"
    main_html = f"""
      <h1>{_escape(heading)}</h1>
      {list_html}
"""
    return _render_page(site, heading, "/blog", main_html)


def _render_blog_post(site: dict[str, Any], article: ArticleSummary, document: ContentDocument) -> str:
    main_html = f"""
      <article class="post">
        <h1>{_escape(article.title)}</h1>
        <p class="post-date">{_escape(article.display_date)}</p>
        {_render_markdown(document.body)}
        <a class="button ghost" href="/blog">Back to blog</a>
      </article>
"""
    return _render_page(site, article.title, "/blog", main_html)


def _build_placeholder_svg(label: str) -> str:
    safe_label = _escape(label)
    return f"""<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 600 400" role="img" aria-label="{safe_label}">
  <rect width="600" height="400" fill="#e5e7eb" />
  <text x="40" y="210" fill="#374151" font-family="Georgia, serif" font-size="22">{safe_label}</text>
</svg>
"""


def _write_site_assets(content_dir: Path, site_dir: Path) -> set[str]:
    img_dir = site_dir / "assets" / "img"
    img_dir.mkdir(parents=True, exist_ok=True)
    (img_dir / PLACEHOLDER_IMAGE).write_text(_build_placeholder_svg("Photo placeholder"), encoding="utf-8")
    available = {PLACEHOLDER_IMAGE}
    media_dir = content_dir / "media"
    if media_dir.exists():
        for path in media_dir.rglob("*"):
            if path.is_dir():
                continue
            rel = path.relative_to(media_dir)
            target = img_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
            available.add(rel.as_posix())
    return available


def build_site(content_dir: Path = CONTENT_DIR, site_dir: Path = SITE_DIR) -> None:
    site = _read_site_config(content_dir)
    try:
        documents = load_documents(content_dir / "blog")
        entries = list_entries(documents, on_duplicate=site["duplicate_urls"])
    except ContentError as exc:
        raise SystemExit(f"{PREFIX} Content error: {exc}") from exc

    if site_dir.exists():
        shutil.rmtree(site_dir)
    site_dir.mkdir(parents=True, exist_ok=True)
    available_images = _write_site_assets(content_dir, site_dir)

    _write_page(site_dir, Path("index.html"), _render_home(site, available_images))
    articles = [article for article, _ in entries]
    _write_page(site_dir, Path("blog") / "index.html", _render_blog_index(site, articles))
    written: set[Path] = set()
    for article, document in entries:
        output_path = _url_output_path(article.url)
        # Entries are newest first, so the newest post keeps a shared URL.
        if output_path in written:
            print(f"{PREFIX} Warning: not overwriting {output_path} with {document.source_path}")
            continue
        written.add(output_path)
        _write_page(site_dir, output_path, _render_blog_post(site, article, document))

    skipped = len(documents) - len(articles)
    print(f"{PREFIX} Built {len(written)} article(s) into {site_dir} ({skipped} unlisted).")


if __name__ == "__main__":
    build_site()
