"""Hook registry for session and simulation lifecycle events."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class HookName(str, Enum):
    DATASET_LOADED = "dataset_loaded"
    MODE_CHANGED = "mode_changed"
    TICK = "tick"
    CONVERGED = "converged"
    FILTER_CHANGED = "filter_changed"
    ON_ERROR = "on_error"


HookCallback = Callable[[dict[str, Any], dict[str, Any]], dict[str, Any] | None]


class HookManager:
    """In-process hook manager with deterministic callback ordering."""

    def __init__(self) -> None:
        self._callbacks: dict[HookName, list[HookCallback]] = defaultdict(list)

    def register(self, name: HookName, callback: HookCallback) -> None:
        self._callbacks[name].append(callback)

    def unregister(self, name: HookName, callback: HookCallback) -> None:
        callbacks = self._callbacks.get(name, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def has_callbacks(self, name: HookName) -> bool:
        return bool(self._callbacks.get(name))

    def emit(self, name: HookName, context: dict[str, Any], envelope: dict[str, Any] | None = None) -> dict[str, Any]:
        result = dict(envelope or {})
        for callback in list(self._callbacks.get(name, [])):
            try:
                patch = callback(context, dict(result))
            except Exception as exc:
                if name == HookName.ON_ERROR or not self._callbacks.get(HookName.ON_ERROR):
                    raise
                logger.warning("Hook %s callback failed: %s", name.value, exc)
                self._emit_error(exc, {"hook": name.value, **context})
                continue
            if patch:
                result.update(patch)
        return result

    def _emit_error(self, exc: Exception, context: dict[str, Any]) -> None:
        for callback in self._callbacks[HookName.ON_ERROR]:
            callback({"exception": exc, **context}, {})
