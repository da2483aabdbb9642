"""Pydantic models for the constellation map."""

from enum import Enum

from pydantic import BaseModel, Field


# --- Graph models (static curriculum data) ---


class Subpage(BaseModel):
    id: str
    title: str


class Node(BaseModel):
    id: str  # global join key to content and cross-group links
    name: str
    x: float
    y: float
    difficulty: int = Field(default=3, ge=0)
    subpages: list[Subpage] = Field(default_factory=list)


class Link(BaseModel):
    source: str
    target: str


class ConstellationGroup(BaseModel):
    name: str
    color: str
    nodes: list[Node] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)


class Point(BaseModel):
    """Fallback coordinate returned for ids that resolve to no node."""
    x: float = 0.0
    y: float = 0.0


# --- Persisted state models ---


class ViewTransform(BaseModel):
    translate_x: float
    translate_y: float
    scale: float


class ProgressSnapshot(BaseModel):
    """Frozen read of the progress record, taken once per scene build."""
    visited: dict[str, list[str]] = Field(default_factory=dict)
    completion: dict[str, float] = Field(default_factory=dict)

    def completion_for(self, section_id: str) -> float:
        return self.completion.get(section_id, 0.0)

    def is_visited(self, section_id: str, subpage_id: str) -> bool:
        return subpage_id in self.visited.get(section_id, [])


# --- Content / navigation models ---


class ContentRecord(BaseModel):
    """One markdown page, as consumed by tooltips and page templates."""
    slug: str
    title: str
    excerpt: str | None = None
    html: str | None = None


class NavItem(BaseModel):
    id: str
    name: str


class NavSection(BaseModel):
    title: str
    items: list[NavItem] = Field(default_factory=list)


class PageRef(BaseModel):
    """A single routable page: a section overview or one of its sub-pages."""
    section_id: str
    subpage_id: str
    title: str
    route: str


# --- Scene models (render engine output) ---


class BackgroundStar(BaseModel):
    x: float
    y: float
    radius: float
    opacity: float


class LinkSegment(BaseModel):
    source: str
    target: str
    x1: float
    y1: float
    x2: float
    y2: float


class NodeGlyph(BaseModel):
    node_id: str
    label: str
    x: float
    y: float
    color: str
    difficulty: int
    point_count: int
    star_points: list[tuple[float, float]]  # relative to (x, y)
    base_opacity: float
    completion: float = 0.0
    progress_wedge: str | None = None  # SVG path, relative to (x, y)
    full: bool = False
    dot_radius: float = 2.0
    label_offset: float = 30.0


class GroupLayer(BaseModel):
    key: str
    name: str
    color: str
    links: list[LinkSegment] = Field(default_factory=list)
    nodes: list[NodeGlyph] = Field(default_factory=list)


class Scene(BaseModel):
    width: float
    height: float
    background: list[BackgroundStar] = Field(default_factory=list)
    groups: list[GroupLayer] = Field(default_factory=list)

    def glyph(self, node_id: str) -> NodeGlyph | None:
        for group in self.groups:
            for glyph in group.nodes:
                if glyph.node_id == node_id:
                    return glyph
        return None


# --- Interaction models ---


class InteractionState(str, Enum):
    IDLE = "idle"
    PANNING = "panning"
    HOVERING = "hovering"
    SUBPAGE_MENU = "subpage_menu"


class Tooltip(BaseModel):
    node_id: str
    title: str
    difficulty_glyphs: str
    completion_label: str | None = None
    description: str
    left: float
    top: float


class MenuEntry(BaseModel):
    subpage_id: str
    title: str
    route: str
    visited: bool


class SubpageMenu(BaseModel):
    section_id: str
    title: str
    left: float
    top: float
    entries: list[MenuEntry]
    completion: float
