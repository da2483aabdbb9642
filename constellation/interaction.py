"""Pointer-driven state machine for one mounted map view.

States: IDLE, PANNING (drag/wheel in progress), HOVERING (tooltip shown) and
SUBPAGE_MENU (section menu open). Leaving HOVERING always hides the tooltip and
leaving SUBPAGE_MENU always drops the menu. Only user-initiated gestures and
the zoom buttons write the camera back to the view-state store; restoring it at
mount never does.
"""

import logging
from typing import Callable

from constellation.config import MapConfig
from constellation.content import ContentIndex, describe
from constellation.graph import GraphDataModel
from constellation.models import (
    InteractionState,
    MenuEntry,
    SubpageMenu,
    Tooltip,
    ViewTransform,
)
from constellation.navigation import OVERVIEW_TITLE, page_route
from constellation.progress import INDEX_PAGE, ProgressStore
from constellation.view_state import ViewStateStore, default_transform

logger = logging.getLogger(__name__)

TOOLTIP_OFFSET_X = 15
TOOLTIP_OFFSET_Y = -15
DIFFICULTY_SLOTS = 5
FILLED = "★"
EMPTY = "☆"


def difficulty_glyphs(difficulty: int) -> str:
    filled = max(0, min(difficulty, DIFFICULTY_SLOTS))
    return FILLED * filled + EMPTY * (DIFFICULTY_SLOTS - filled)


def completion_label(completion: float) -> str | None:
    if completion <= 0:
        return None
    return f"{round(completion * 100)}% complete"


class MapInteraction:
    def __init__(
        self,
        graph: GraphDataModel,
        progress: ProgressStore,
        view_state: ViewStateStore,
        content: ContentIndex | None = None,
        config: MapConfig | None = None,
        width: float = 1200,
        height: float = 800,
        navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.graph = graph
        self.progress = progress
        self.view_state = view_state
        self.content = content or ContentIndex([])
        self.config = config or MapConfig()
        self.width = width
        self.height = height
        self._navigate_cb = navigate

        self.state = InteractionState.IDLE
        self.transform = self._default()
        self.tooltip: Tooltip | None = None
        self.menu: SubpageMenu | None = None
        self.highlighted_group: str | None = None
        self.location: str | None = None

    def _default(self) -> ViewTransform:
        return default_transform(self.width, self.height, self.config.default_scale)

    def _clamp(self, k: float) -> float:
        return max(self.config.min_scale, min(self.config.max_scale, k))

    def _to_idle(self) -> None:
        self.tooltip = None
        self.menu = None
        self.state = InteractionState.IDLE

    # --- Camera ---

    def mount(self) -> ViewTransform:
        """Restore the stored camera, or center the default one. Never writes."""
        restored = self.view_state.restore()
        if restored is None:
            logger.debug("No valid stored view; using default transform")
            self.transform = self._default()
        else:
            self.transform = restored
        self._to_idle()
        return self.transform

    def begin_gesture(self) -> None:
        self._to_idle()
        self.state = InteractionState.PANNING

    def drag(self, dx: float, dy: float) -> None:
        if self.state != InteractionState.PANNING:
            self.begin_gesture()
        self.transform = ViewTransform(
            translate_x=self.transform.translate_x + dx,
            translate_y=self.transform.translate_y + dy,
            scale=self.transform.scale,
        )

    def _zoom_about(self, px: float, py: float, factor: float) -> None:
        t = self.transform
        k = self._clamp(t.scale * factor)
        ratio = k / t.scale
        self.transform = ViewTransform(
            translate_x=px - (px - t.translate_x) * ratio,
            translate_y=py - (py - t.translate_y) * ratio,
            scale=k,
        )

    def wheel(self, px: float, py: float, factor: float) -> None:
        """Zoom keeping the screen point (px, py) fixed."""
        if self.state != InteractionState.PANNING:
            self.begin_gesture()
        self._zoom_about(px, py, factor)

    def end_gesture(self, user_initiated: bool = True) -> None:
        """Finish a pan/zoom. Saves only a user gesture that was in progress."""
        if self.state != InteractionState.PANNING:
            return
        self.state = InteractionState.IDLE
        if user_initiated:
            self.view_state.save(self.transform)

    def zoom_in(self) -> None:
        self._button_zoom(self.config.zoom_in_factor)

    def zoom_out(self) -> None:
        self._button_zoom(self.config.zoom_out_factor)

    def _button_zoom(self, factor: float) -> None:
        self._to_idle()
        self._zoom_about(self.width / 2, self.height / 2, factor)
        self.view_state.save(self.transform)

    def reset_view(self) -> None:
        self.view_state.clear()
        self._to_idle()
        self.transform = self._default()

    def resize(self, width: float, height: float) -> None:
        """New canvas size; the camera stays where it is."""
        self.width = width
        self.height = height

    # --- Hover ---

    def pointer_enter(self, node_id: str, px: float, py: float) -> Tooltip | None:
        if self.state in (InteractionState.PANNING, InteractionState.SUBPAGE_MENU):
            return None
        node = self.graph.get_node(node_id)
        if node is None:
            return None
        self.tooltip = Tooltip(
            node_id=node.id,
            title=node.name,
            difficulty_glyphs=difficulty_glyphs(node.difficulty),
            completion_label=completion_label(self.progress.completion(node.id)),
            description=describe(self.content.for_node(node.id), self.config.tooltip_max_chars),
            left=px + TOOLTIP_OFFSET_X,
            top=py + TOOLTIP_OFFSET_Y,
        )
        self.state = InteractionState.HOVERING
        return self.tooltip

    def pointer_leave(self, node_id: str) -> None:
        if self.state == InteractionState.HOVERING and self.tooltip and self.tooltip.node_id == node_id:
            self._to_idle()

    # --- Clicks ---

    def click_node(self, node_id: str, px: float, py: float) -> SubpageMenu | str | None:
        """Open the section menu, or navigate straight to a section with no sub-pages.

        Returns the opened menu, the route navigated to, or None when the click
        only dismissed an open menu.
        """
        if self.state == InteractionState.SUBPAGE_MENU:
            self._to_idle()
            return None
        if self.state == InteractionState.PANNING:
            return None
        self._to_idle()

        node = self.graph.get_node(node_id)
        if node is None:
            logger.warning("Click on unknown node '%s'", node_id)
            return None
        self.select_node(node.id)

        if not node.subpages:
            return self._navigate(node.id, INDEX_PAGE)

        visited = set(self.progress.visited(node.id))
        entries = [MenuEntry(
            subpage_id=INDEX_PAGE, title=OVERVIEW_TITLE,
            route=page_route(node.id), visited=INDEX_PAGE in visited,
        )]
        for sub in node.subpages:
            entries.append(MenuEntry(
                subpage_id=sub.id, title=sub.title,
                route=page_route(node.id, sub.id), visited=sub.id in visited,
            ))
        self.menu = SubpageMenu(
            section_id=node.id,
            title=node.name,
            left=px,
            top=py,
            entries=entries,
            completion=self.progress.completion(node.id),
        )
        self.state = InteractionState.SUBPAGE_MENU
        return self.menu

    def select_menu_entry(self, subpage_id: str) -> str | None:
        if self.menu is None:
            return None
        section_id = self.menu.section_id
        if subpage_id not in {e.subpage_id for e in self.menu.entries}:
            raise ValueError(f"'{subpage_id}' is not a page of section '{section_id}'")
        self._to_idle()
        return self._navigate(section_id, subpage_id)

    def click_background(self) -> None:
        """Click outside any menu: closes an open menu and does nothing else."""
        if self.state == InteractionState.SUBPAGE_MENU:
            self._to_idle()

    def select_node(self, node_id: str) -> str | None:
        """Group kept bright while the others dim; None dims nothing."""
        self.highlighted_group = self.graph.find_group_containing(node_id)
        return self.highlighted_group

    def _navigate(self, section_id: str, subpage_id: str) -> str:
        route = page_route(section_id, subpage_id)
        # rendering the target page is what records the visit
        self.progress.mark_visited(section_id, subpage_id)
        self.location = route
        logger.debug("Navigate to %s", route)
        if self._navigate_cb is not None:
            self._navigate_cb(route)
        return route
