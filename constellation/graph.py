"""Static constellation graph: groups, nodes, links and the lookups over them."""

import logging
from pathlib import Path
from typing import Any, Iterator

import yaml

from constellation.models import ConstellationGroup, Link, Node, Point

logger = logging.getLogger(__name__)

ORIGIN = Point(x=0.0, y=0.0)


class GraphDataModel:
    """Read-only view over the constellation groups.

    Node ids are unique across every group, so an id index is built once at
    construction and every lookup is a dict hit. Unknown ids never raise: node
    lookups fall back to the origin and group lookups return None.
    """

    def __init__(self, groups: dict[str, ConstellationGroup]) -> None:
        self.groups = groups
        self._nodes: dict[str, Node] = {}
        self._owner: dict[str, str] = {}
        for key, group in groups.items():
            for node in group.nodes:
                if node.id in self._nodes:
                    raise ValueError(
                        f"Duplicate node id '{node.id}' in groups "
                        f"'{self._owner[node.id]}' and '{key}'"
                    )
                self._nodes[node.id] = node
                self._owner[node.id] = key

        for key, link in self.unresolved_links():
            logger.warning(
                "Link %s -> %s in group '%s' has an unknown endpoint; drawing it from the origin",
                link.source, link.target, key,
            )

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "GraphDataModel":
        return cls({key: ConstellationGroup(**value) for key, value in raw.items()})

    def find_node_by_id(self, node_id: str) -> Node | Point:
        return self._nodes.get(node_id, ORIGIN)

    def find_group_containing(self, node_id: str) -> str | None:
        return self._owner.get(node_id)

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def group_for(self, node_id: str) -> ConstellationGroup | None:
        key = self._owner.get(node_id)
        return self.groups[key] if key is not None else None

    def resolve_link(self, link: Link) -> tuple[tuple[float, float], tuple[float, float]]:
        """Endpoints of a link, searching all groups. Missing ends sit at the origin."""
        source = self.find_node_by_id(link.source)
        target = self.find_node_by_id(link.target)
        return (source.x, source.y), (target.x, target.y)

    def unresolved_links(self) -> list[tuple[str, Link]]:
        missing = []
        for key, group in self.groups.items():
            for link in group.links:
                if link.source not in self._nodes or link.target not in self._nodes:
                    missing.append((key, link))
        return missing

    def iter_nodes(self) -> Iterator[tuple[str, Node]]:
        for key, group in self.groups.items():
            for node in group.nodes:
                yield key, node

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


def load_graph(path: Path) -> GraphDataModel:
    """Load constellation groups from a YAML file keyed by group id."""
    raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
    graph = GraphDataModel.from_dict(raw)
    logger.debug("Loaded %d groups, %d nodes from %s", len(graph.groups), len(graph), path)
    return graph
