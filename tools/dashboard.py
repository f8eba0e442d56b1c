#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path

from content_lister import ContentDocument, ContentError, derive_url, format_date, is_listed, list_entries
from content_loader import load_documents

BASE_DIR = Path(__file__).resolve().parents[1]
BLOG_DIR = BASE_DIR / "content" / "blog"
PREFIX = "[site]"


def _describe(document: ContentDocument) -> str:
    try:
        url = derive_url(document.source_path)
    except ContentError:
        url = "(unsupported path)"
    date = format_date(document.date) if document.date else "(no date)"
    state = "listed" if is_listed(document) else "unlisted"
    return f"{PREFIX} {url} ({document.title or 'untitled'}) {date} [{state}] <- {document.source_path}"


def format_dashboard(documents: list[ContentDocument]) -> str:
    """Lists the blog in index order, then the unlisted drafts."""
    lines: list[str] = [f"{PREFIX} Dashboard"]
    for index, (article, document) in enumerate(list_entries(documents, on_duplicate="warn"), start=1):
        lines.append(f"{PREFIX} {index}. {article.url} ({article.title}) {article.display_date} <- {document.source_path}")
    unlisted = [doc for doc in documents if not is_listed(doc)]
    if unlisted:
        lines.append(f"{PREFIX} Unlisted:")
        lines.extend(_describe(doc) for doc in unlisted)
    return "\n".join(lines)


def main() -> int:
    try:
        print(format_dashboard(load_documents(BLOG_DIR)))
    except ContentError as exc:
        print(f"{PREFIX} Content error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
