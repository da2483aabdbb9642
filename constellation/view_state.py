"""Persisted pan/zoom camera for the map view."""

import logging
import math
import re

from constellation.models import ViewTransform
from constellation.store import VIEW_SCALE_KEY, VIEW_X_KEY, VIEW_Y_KEY, StateStore

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 0.6

NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def default_transform(width: float, height: float, scale: float = DEFAULT_SCALE) -> ViewTransform:
    """Centered camera used when nothing valid is stored."""
    return ViewTransform(translate_x=width / 2, translate_y=height / 2, scale=scale)


def _parse(raw: str | None) -> float | None:
    """Plain decimal or exponent notation only; the map page applies the same rule."""
    if raw is None or not NUMBER.fullmatch(raw):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


class ViewStateStore:
    def __init__(self, store: StateStore) -> None:
        self.store = store

    def save(self, transform: ViewTransform) -> None:
        self.store.set(VIEW_X_KEY, repr(transform.translate_x))
        self.store.set(VIEW_Y_KEY, repr(transform.translate_y))
        self.store.set(VIEW_SCALE_KEY, repr(transform.scale))

    def restore(self) -> ViewTransform | None:
        """Stored transform, or None unless all three parts are finite numbers."""
        x = _parse(self.store.get(VIEW_X_KEY))
        y = _parse(self.store.get(VIEW_Y_KEY))
        k = _parse(self.store.get(VIEW_SCALE_KEY))
        if x is None or y is None or k is None:
            return None
        if k <= 0:
            logger.warning("Ignoring stored view scale %s", k)
            return None
        return ViewTransform(translate_x=x, translate_y=y, scale=k)

    def clear(self) -> None:
        for key in (VIEW_X_KEY, VIEW_Y_KEY, VIEW_SCALE_KEY):
            self.store.delete(key)
