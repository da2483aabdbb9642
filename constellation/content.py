"""Markdown content pages and the short descriptions shown in map tooltips."""

import logging
import re
from pathlib import Path
from typing import Any

import markdown
import yaml
from bs4 import BeautifulSoup
from pydantic import ValidationError

from constellation.models import ContentRecord

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"
PLACEHOLDER_TITLE = "Content Coming Soon"
PLACEHOLDER_HTML = "<p>Detailed information for this topic is currently being developed.</p>"

FRONT_MATTER = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)


def truncate(text: str, limit: int = 150) -> str:
    """Cut to at most ``limit`` characters, ending with an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def first_paragraph(html: str) -> str | None:
    p = BeautifulSoup(html, "html.parser").find("p")
    if p is None:
        return None
    text = p.get_text(" ", strip=True)
    return text or None


def describe(record: ContentRecord | None, limit: int = 150) -> str:
    """Tooltip text: the excerpt, else the first paragraph, else a placeholder."""
    description = None
    if record is not None:
        if record.excerpt:
            description = record.excerpt
        elif record.html:
            description = first_paragraph(record.html)
    return truncate(description or NO_DESCRIPTION, limit)


def parse_page(text: str, fallback_slug: str) -> ContentRecord:
    """Split YAML front matter from the markdown body and render the body.

    Raises ``yaml.YAMLError`` when the front matter is not a YAML mapping.
    """
    meta: dict[str, Any] = {}
    body = text
    m = FRONT_MATTER.match(text)
    if m:
        meta = yaml.safe_load(m.group(1)) or {}
        if not isinstance(meta, dict):
            raise yaml.YAMLError(f"front matter is a {type(meta).__name__}, not a mapping")
        body = text[m.end():]
    html = markdown.markdown(body, extensions=["fenced_code", "tables"])
    excerpt = meta.get("excerpt")
    return ContentRecord(
        slug=str(meta.get("slug") or fallback_slug),
        title=str(meta.get("title") or fallback_slug),
        excerpt=str(excerpt) if excerpt is not None else None,
        html=html,
    )


def load_content(content_dir: Path) -> list[ContentRecord]:
    """Load every ``*.md`` page below ``content_dir``. Missing dir -> no pages."""
    if not content_dir.is_dir():
        logger.warning("Content directory %s not found; every page will be a placeholder", content_dir)
        return []

    records = []
    for path in sorted(content_dir.rglob("*.md")):
        fallback = path.relative_to(content_dir).with_suffix("").as_posix()
        try:
            records.append(parse_page(path.read_text(encoding="utf-8"), fallback))
        except (yaml.YAMLError, ValidationError) as e:
            logger.warning("Skipping %s: bad front matter (%s)", path, e)
    logger.info("Loaded %d content pages from %s", len(records), content_dir)
    return records


class ContentIndex:
    """Slug lookup over content records."""

    def __init__(self, records: list[ContentRecord]) -> None:
        self._by_slug = {r.slug.strip("/"): r for r in records}

    def get(self, slug: str) -> ContentRecord | None:
        return self._by_slug.get(slug.strip("/"))

    def for_node(self, node_id: str) -> ContentRecord | None:
        return self.get(node_id) or self.get(f"{node_id}/index")

    def page(self, section_id: str, subpage_id: str) -> ContentRecord | None:
        record = self.get(f"{section_id}/{subpage_id}")
        if record is None and subpage_id == "index":
            record = self.get(section_id)
        return record

    def __len__(self) -> int:
        return len(self._by_slug)
