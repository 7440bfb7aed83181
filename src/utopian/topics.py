"""Reading topic content back from the node directory."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .store import FileStore

FRONTMATTER_DELIMITER = "---"


def list_topics(store: FileStore) -> list[str]:
    """Slugs of every topic directory under ``topics/``, sorted."""
    return [
        name
        for name in store.list_dir("topics")
        if store.path("topics", name).is_dir()
    ]


def _split_frontmatter(text: str) -> tuple[str | None, str]:
    lines = text.split("\n")
    delimiters = [i for i, line in enumerate(lines) if line.strip() == FRONTMATTER_DELIMITER]
    if len(delimiters) < 2:
        return None, text
    start, end = delimiters[0], delimiters[1]
    return "\n".join(lines[start + 1:end]), "\n".join(lines[end + 1:])


def strip_frontmatter(text: str) -> str:
    """Return the body after the second ``---`` line, or the whole text."""
    return _split_frontmatter(text)[1].strip()


def parse_frontmatter(text: str) -> dict[str, Any]:
    """Parse the YAML frontmatter of a Markdown document.

    Returns an empty mapping when there is no frontmatter or it is not
    a mapping.
    """
    header, _ = _split_frontmatter(text)
    if header is None:
        return {}
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def topic_document(store: FileStore, slug: str) -> Path | None:
    """Locate the main document of a topic.

    ``topics/<slug>/topic.md`` wins over ``docs/overview.md``.
    """
    for candidate in (Path("topics") / slug / "topic.md", Path("topics") / slug / "docs" / "overview.md"):
        if store.path(candidate).is_file():
            return candidate
    return None


def read_topic_content(store: FileStore, slug: str) -> str | None:
    """Body of a topic's main document with frontmatter removed."""
    document = topic_document(store, slug)
    if document is None:
        return None
    text = store.read_text(document)
    return None if text is None else strip_frontmatter(text)


def read_topic_title(store: FileStore, slug: str) -> str:
    """Title from frontmatter, falling back to the slug."""
    document = topic_document(store, slug)
    text = store.read_text(document) if document else None
    if text:
        title = parse_frontmatter(text).get("title")
        if title:
            return str(title)
    return slug.replace("-", " ").title()
