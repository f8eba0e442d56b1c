from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path

from content_lister import INDEX_FILENAMES, ContentDocument, ContentError

FRONTMATTER_PATTERN = re.compile(r"^---\s*$", re.MULTILINE)
TRUE_VALUES = {"true", "yes", "on", "1"}
FALSE_VALUES = {"false", "no", "off", "0"}


def _parse_date(raw: str, path: Path) -> date:
    # Front matter dates may carry a time part; only the calendar day counts.
    value = raw.strip()[:10]
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ContentError(f"Unreadable date {raw!r} in {path}") from None


def _parse_listed(raw: str, path: Path) -> bool:
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ContentError(f"Unreadable listed flag {raw!r} in {path}")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _split_frontmatter(raw: str) -> tuple[dict[str, str], str]:
    if not raw.startswith("---"):
        return {}, raw.strip()
    parts = FRONTMATTER_PATTERN.split(raw, maxsplit=2)
    if len(parts) < 3:
        return {}, raw.strip()
    fields: dict[str, str] = {}
    for line in parts[1].splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        fields[key.strip().lower()] = _unquote(value.strip())
    return fields, parts[2].strip()


def parse_document(path: Path, blog_dir: Path) -> ContentDocument:
    raw = path.read_text(encoding="utf-8")
    fields, body = _split_frontmatter(raw)
    source_path = path.relative_to(blog_dir).as_posix()

    title = fields.get("title")
    published = _parse_date(fields["date"], path) if fields.get("date") else None
    listed = _parse_listed(fields["listed"], path) if fields.get("listed") else None

    return ContentDocument(
        source_path=source_path,
        title=title,
        date=published,
        listed=listed,
        body=body,
    )


def load_documents(blog_dir: Path) -> list[ContentDocument]:
    if not blog_dir.exists():
        return []
    paths = sorted(
        path
        for path in blog_dir.rglob("*")
        if path.is_file() and path.name in INDEX_FILENAMES
    )
    return [parse_document(path, blog_dir) for path in paths]
