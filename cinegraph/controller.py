"""Type filter, link-strength slider and layout-mode selector."""

from __future__ import annotations

import logging

from cinegraph.config import ControlsConfig
from cinegraph.hooks import HookName
from cinegraph.models import LayoutMode, NodeType
from cinegraph.session import Visualizer
from cinegraph.storage.base import PreferenceStore
from cinegraph.view import parse_type_filter

logger = logging.getLogger(__name__)

LAYOUT_MODE_KEY = "layout_mode"
LINK_STRENGTH_MAX = 1000


def load_layout_mode(store: PreferenceStore | None, default: LayoutMode) -> LayoutMode:
    if store is None:
        return default
    stored = store.get_preference(LAYOUT_MODE_KEY)
    if stored is None:
        return default
    try:
        return LayoutMode(stored)
    except ValueError:
        logger.warning("Ignoring unknown stored layout mode %r; using %s", stored, default.value)
        return default


def save_layout_mode(store: PreferenceStore | None, mode: LayoutMode) -> None:
    if store is not None:
        store.set_preference(LAYOUT_MODE_KEY, mode.value)


class FilterModeController:
    """Turns control changes into visualizer calls; filters never touch the layout."""

    def __init__(
        self,
        visualizer: Visualizer,
        store: PreferenceStore | None = None,
        controls: ControlsConfig | None = None,
    ) -> None:
        self.visualizer = visualizer
        self.store = store
        self.controls = controls or visualizer.config.controls
        self.type_filter: NodeType | None = None
        self.link_strength_value = self.controls.default_link_strength

        mode = load_layout_mode(store, self.controls.default_mode)
        if mode != visualizer.mode:
            visualizer.set_mode(mode)
        else:
            visualizer.bindings.set_link_strength_enabled(mode.uses_links)

    @property
    def mode(self) -> LayoutMode:
        return self.visualizer.mode

    @property
    def link_strength_enabled(self) -> bool:
        return self.mode.uses_links

    def set_type_filter(self, value: str | NodeType | None) -> NodeType | None:
        type_filter = parse_type_filter(value)
        self.type_filter = type_filter
        self.visualizer.set_type_filter(type_filter)
        self.visualizer.hooks.emit(HookName.FILTER_CHANGED, {"filter": type_filter.value if type_filter else "all"})
        return type_filter

    def set_link_strength(self, value: int) -> bool:
        """Apply a slider value in [0, 1000]; returns False while the slider is disabled."""
        if not 0 <= value <= LINK_STRENGTH_MAX:
            raise ValueError(f"link strength must be between 0 and {LINK_STRENGTH_MAX}, got {value}")
        if not self.link_strength_enabled:
            logger.debug("Ignoring link strength change in %s mode", self.mode.value)
            return False
        self.link_strength_value = value
        self.visualizer.set_link_strength(value / self.controls.link_strength_scale)
        return True

    def set_mode(self, mode: LayoutMode | str) -> LayoutMode:
        resolved = LayoutMode(mode)
        save_layout_mode(self.store, resolved)
        self.visualizer.set_mode(resolved)
        return resolved
