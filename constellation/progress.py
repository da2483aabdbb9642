"""Visited-page progress per top-level section."""

import json
import logging

from constellation.graph import GraphDataModel
from constellation.models import ProgressSnapshot
from constellation.store import VISITED_KEY, StateStore

logger = logging.getLogger(__name__)

INDEX_PAGE = "index"


class ProgressStore:
    """Tracks which sub-pages of each section have been visited.

    The whole record lives under one key as a JSON object of lists and is
    rewritten on every change, so a single update is never lost.
    """

    def __init__(self, store: StateStore, graph: GraphDataModel) -> None:
        self.store = store
        self.graph = graph

    def _load(self) -> dict[str, list[str]]:
        raw = self.store.get(VISITED_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed %s record", VISITED_KEY)
            return {}
        if not isinstance(data, dict):
            logger.warning("Discarding malformed %s record", VISITED_KEY)
            return {}
        record: dict[str, list[str]] = {}
        for section_id, pages in data.items():
            if not isinstance(pages, list):
                continue
            # dict.fromkeys keeps first-seen order and drops duplicates
            record[str(section_id)] = list(dict.fromkeys(str(p) for p in pages))
        return record

    def _save(self, record: dict[str, list[str]]) -> None:
        self.store.set(VISITED_KEY, json.dumps(record, sort_keys=True))

    def mark_visited(self, section_id: str, subpage_id: str = INDEX_PAGE) -> bool:
        """Record a page visit. Returns True when the record changed."""
        if not self.store.available:
            return False
        record = self._load()
        pages = record.setdefault(section_id, [])
        if subpage_id in pages:
            return False
        pages.append(subpage_id)
        self._save(record)
        logger.debug("Visited %s/%s", section_id, subpage_id)
        return True

    def is_visited(self, section_id: str, subpage_id: str) -> bool:
        return subpage_id in self._load().get(section_id, [])

    def visited(self, section_id: str) -> list[str]:
        return list(self._load().get(section_id, []))

    def completion(self, section_id: str) -> float:
        """Fraction of the section's pages visited; the overview counts as one page."""
        return self._completion(section_id, self._load().get(section_id, []))

    def _completion(self, section_id: str, pages: list[str]) -> float:
        node = self.graph.get_node(section_id)
        if node is None or not node.subpages or not pages:
            return 0.0
        return min(1.0, len(pages) / (len(node.subpages) + 1))

    def reset_all(self) -> None:
        self.store.delete(VISITED_KEY)
        logger.info("Progress reset")

    def snapshot(self) -> ProgressSnapshot:
        record = self._load()
        return ProgressSnapshot(
            visited=record,
            completion={
                node.id: self._completion(node.id, record.get(node.id, []))
                for _, node in self.graph.iter_nodes()
            },
        )
