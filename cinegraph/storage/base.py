"""Storage backend interfaces for cinegraph preferences."""

from __future__ import annotations

from typing import Protocol


class PreferenceStore(Protocol):
    def init_schema(self) -> None: ...

    def get_preference(self, key: str, default: str | None = None) -> str | None: ...

    def set_preference(self, key: str, value: str) -> None: ...

    def list_preferences(self) -> dict[str, str]: ...
