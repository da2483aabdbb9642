"""Sidebar tree, page routes and previous/next ordering."""

import logging
from pathlib import Path
from typing import Any

import yaml

from constellation.graph import GraphDataModel
from constellation.models import NavSection, PageRef
from constellation.progress import INDEX_PAGE

logger = logging.getLogger(__name__)

OVERVIEW_TITLE = "Overview"


def page_route(section_id: str, subpage_id: str | None = None) -> str:
    return f"/page/{section_id}/{subpage_id or INDEX_PAGE}"


def load_navigation(path: Path) -> list[NavSection]:
    raw: list[dict[str, Any]] = yaml.safe_load(path.read_text()) or []
    return [NavSection(**section) for section in raw]


def section_pages(graph: GraphDataModel, section_id: str, title: str | None = None) -> list[PageRef]:
    """The overview page followed by the section's sub-pages, in declared order."""
    node = graph.get_node(section_id)
    if title is None:
        title = node.name if node else section_id
    pages = [PageRef(
        section_id=section_id, subpage_id=INDEX_PAGE,
        title=title, route=page_route(section_id),
    )]
    if node is not None:
        for sub in node.subpages:
            pages.append(PageRef(
                section_id=section_id, subpage_id=sub.id,
                title=sub.title, route=page_route(section_id, sub.id),
            ))
    return pages


def page_sequence(navigation: list[NavSection], graph: GraphDataModel) -> list[PageRef]:
    """Every page in reading order: sidebar sections first, then graph-only nodes."""
    sequence: list[PageRef] = []
    seen: set[str] = set()
    for section in navigation:
        for item in section.items:
            if item.id in seen:
                continue
            seen.add(item.id)
            sequence.extend(section_pages(graph, item.id, title=item.name))
    for _, node in graph.iter_nodes():
        if node.id not in seen:
            seen.add(node.id)
            sequence.extend(section_pages(graph, node.id))
    return sequence


def prev_next(sequence: list[PageRef], route: str) -> tuple[PageRef | None, PageRef | None]:
    routes = [p.route for p in sequence]
    if route not in routes:
        return None, None
    i = routes.index(route)
    prev_page = sequence[i - 1] if i > 0 else None
    next_page = sequence[i + 1] if i < len(sequence) - 1 else None
    return prev_page, next_page


def missing_nav_nodes(navigation: list[NavSection], graph: GraphDataModel) -> list[str]:
    """Sidebar ids with no node on the map (they still get placeholder pages)."""
    return [
        item.id for section in navigation for item in section.items
        if item.id not in graph
    ]
