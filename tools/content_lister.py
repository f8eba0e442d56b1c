from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from pathlib import PurePosixPath
from typing import Iterable

BLOG_URL_PREFIX = "/blog/"
DISPLAY_DATE_FORMAT = "MMMM D, YYYY"
INDEX_FILENAMES = {"index.md", "index.mdx"}
DUPLICATE_POLICIES = {"error", "warn"}
PREFIX = "[site]"

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Longest tokens first so "MMMM" is not read as two "MM".
DATE_TOKEN_PATTERN = re.compile(r"YYYY|MMMM|MMM|MM|M|DD|D")


class ContentError(ValueError):
    """Base class for faults in the blog content collection."""


class MalformedDocumentError(ContentError):
    """A document lacks a field the listing needs."""


class DuplicateURLError(ContentError):
    """Two documents resolve to the same blog URL."""


class UnsupportedSourcePathError(ContentError):
    """A source path is not an index-style document path."""


@dataclass(frozen=True)
class ContentDocument:
    source_path: str
    title: str | None = None
    date: date | None = None
    # None means the front matter did not mention it; the post is listed.
    listed: bool | None = None
    body: str = ""


@dataclass(frozen=True)
class ArticleSummary:
    title: str
    display_date: str
    url: str


def format_date(value: date, fmt: str = DISPLAY_DATE_FORMAT) -> str:
    """
    Renders a date with a small fixed token set.
    YYYY, MMMM (full month), MMM (short month), MM/M (month number),
    DD/D (day). Month names are always English.
    """
    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "YYYY":
            return f"{value.year:04d}"
        if token == "MMMM":
            return MONTH_NAMES[value.month - 1]
        if token == "MMM":
            return MONTH_NAMES[value.month - 1][:3]
        if token == "MM":
            return f"{value.month:02d}"
        if token == "M":
            return str(value.month)
        if token == "DD":
            return f"{value.day:02d}"
        return str(value.day)

    return DATE_TOKEN_PATTERN.sub(replace, fmt)


def derive_url(source_path: str, prefix: str = BLOG_URL_PREFIX) -> str:
    path = PurePosixPath((source_path or "").strip().replace("\\", "/"))
    if path.name not in INDEX_FILENAMES:
        raise UnsupportedSourcePathError(
            f"Only index.md / index.mdx documents are supported: {source_path!r}"
        )
    directory = path.parent.as_posix().strip("/")
    if directory in {"", "."}:
        raise UnsupportedSourcePathError(f"Index document has no directory to name it: {source_path!r}")
    return prefix + directory.lower()


def is_listed(document: ContentDocument) -> bool:
    return document.listed is not False


def _sort_key(document: ContentDocument) -> datetime:
    value = document.date
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def _validate(document: ContentDocument) -> None:
    where = document.source_path or "(unknown source)"
    if document.listed is not None and not isinstance(document.listed, bool):
        raise MalformedDocumentError(f"Invalid listed flag {document.listed!r} in {where}")
    if document.title is None:
        raise MalformedDocumentError(f"Missing title in {where}")
    if not isinstance(document.date, date):
        raise MalformedDocumentError(f"Missing or invalid date in {where}")
    if is_listed(document) and not document.title.strip():
        raise MalformedDocumentError(f"Empty title in listed document {where}")


def list_entries(
    documents: Iterable[ContentDocument],
    on_duplicate: str = "error",
) -> list[tuple[ArticleSummary, ContentDocument]]:
    """
    Turns a content collection into the blog index, newest first, keeping
    the document behind each summary.

    Unlisted documents (listed is False) are dropped; listed or unset ones
    stay. Equal dates keep their input order. Any malformed document fails
    the whole call so a broken content store never yields a partial index.
    """
    if on_duplicate not in DUPLICATE_POLICIES:
        raise ValueError(f"Unknown duplicate policy: {on_duplicate}")

    documents = list(documents)
    for document in documents:
        _validate(document)

    retained = [document for document in documents if is_listed(document)]
    retained.sort(key=_sort_key, reverse=True)

    entries: list[tuple[ArticleSummary, ContentDocument]] = []
    seen: dict[str, str] = {}
    for document in retained:
        url = derive_url(document.source_path)
        if url in seen:
            message = f"{document.source_path} and {seen[url]} both resolve to {url}"
            if on_duplicate == "error":
                raise DuplicateURLError(message)
            print(f"{PREFIX} Warning: {message}")
        else:
            seen[url] = document.source_path
        summary = ArticleSummary(
            title=document.title,
            display_date=format_date(document.date),
            url=url,
        )
        entries.append((summary, document))
    return entries


def list_articles(
    documents: Iterable[ContentDocument],
    on_duplicate: str = "error",
) -> list[ArticleSummary]:
    return [summary for summary, _ in list_entries(documents, on_duplicate)]
