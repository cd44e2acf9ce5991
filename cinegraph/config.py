"""Configuration models and loading for cinegraph."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from cinegraph.models import LayoutMode

PROJECT_CONFIG_NAME = ".cinegraph.yaml"


class SimilarityConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    top_k: int = Field(default=6, ge=0)
    coactor_saturation: int = Field(default=2, ge=1)


class ForceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    charge_strength: float = -180.0
    charge_distance_min: float = Field(default=1.0, gt=0.0)
    charge_distance_max: float = Field(default=400.0, gt=0.0)
    center_strength: float = 1.0
    axis_strength: float = 0.05
    movie_radius: float = 18.0
    entity_radius: float = 12.0
    collide_strength: float = 1.0
    genre_strength: float = 0.08
    genre_ring_ratio: float = 0.32
    similarity_link_distance: float = 90.0
    coactor_link_distance: float = 70.0
    entity_link_distance: float = 60.0
    timeline_strength: float = 0.4
    timeline_span_ratio: float = Field(default=0.8, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_distance_bounds(self) -> ForceConfig:
        if self.charge_distance_min >= self.charge_distance_max:
            raise ValueError("charge_distance_min must be below charge_distance_max")
        return self


class SimulationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    alpha_min: float = Field(default=0.001, gt=0.0, lt=1.0)
    alpha_decay: float | None = Field(default=None, gt=0.0, lt=1.0)
    velocity_decay: float = Field(default=0.4, ge=0.0, le=1.0)
    reheat_alpha: float = Field(default=0.6, gt=0.0, le=1.0)
    drag_alpha_target: float = Field(default=0.3, ge=0.0, le=1.0)
    max_ticks: int = Field(default=3000, ge=1)
    seed: int = 7

    def resolved_alpha_decay(self) -> float:
        if self.alpha_decay is not None:
            return self.alpha_decay
        return 1.0 - self.alpha_min ** (1.0 / 300.0)


class ViewportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    width: float = Field(default=1200.0, gt=0.0)
    height: float = Field(default=800.0, gt=0.0)
    min_scale: float = Field(default=0.1, gt=0.0)
    max_scale: float = Field(default=8.0, gt=0.0)
    fit_padding: float = Field(default=40.0, ge=0.0)
    fit_max_scale: float = Field(default=2.0, gt=0.0)
    zoom_step: float = Field(default=1.3, gt=1.0)

    @model_validator(mode="after")
    def _check_scale_extent(self) -> ViewportConfig:
        if self.min_scale >= self.max_scale:
            raise ValueError("min_scale must be below max_scale")
        if self.fit_max_scale > self.max_scale:
            raise ValueError("fit_max_scale must not exceed max_scale")
        return self


class ControlsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_mode: LayoutMode = LayoutMode.SIMILARITY
    default_link_strength: int = Field(default=120, ge=0, le=1000)
    link_strength_scale: float = Field(default=1000.0, gt=0.0)


class LoaderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    primary: str = "data/movies.json"
    fallback: str | None = "data/movies.sample.json"
    timeout_seconds: float = 10.0


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    backend: str = "sqlite"
    sqlite_path: str = ".cinegraph/cinegraph.db"


class CinegraphConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    similarity: SimilarityConfig = Field(default_factory=SimilarityConfig)
    forces: ForceConfig = Field(default_factory=ForceConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    controls: ControlsConfig = Field(default_factory=ControlsConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_effective_config(
    project_path: str | Path,
    org_defaults: dict[str, Any] | None = None,
    system_defaults: dict[str, Any] | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> CinegraphConfig:
    """Load config with precedence runtime > project .cinegraph.yaml > org > system."""
    project = Path(project_path)
    project_config = _load_yaml(project / PROJECT_CONFIG_NAME)

    merged: dict[str, Any] = {}
    for layer in (system_defaults, org_defaults, project_config, runtime_override):
        if layer:
            merged = _deep_merge(merged, layer)

    return CinegraphConfig.model_validate(merged)
