"""Shared helpers for CLI command modules."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import yaml

from cinegraph.config import CinegraphConfig, load_effective_config
from cinegraph.storage import SQLiteStorage
from cinegraph.storage.base import PreferenceStore

ALIAS_TO_CANONICAL = {
    "run": "layout",
    "stats": "inspect",
    "preferences": "prefs",
}


@dataclass(frozen=True)
class CommandRuntime:
    storage_cls: Callable[[str | Path], PreferenceStore] = SQLiteStorage


def normalize_command(name: str) -> str:
    return ALIAS_TO_CANONICAL.get(name, name)


def load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_config(args: argparse.Namespace) -> CinegraphConfig:
    return load_effective_config(
        project_path=args.project_path,
        org_defaults=load_yaml_dict(args.org_config),
        system_defaults=load_yaml_dict(args.system_config),
        runtime_override=load_yaml_dict(args.runtime_override),
    )


def open_store(config: CinegraphConfig, runtime: CommandRuntime, project_path: str | Path = ".") -> PreferenceStore:
    if config.storage.backend != "sqlite":
        raise ValueError(f"Unsupported storage backend: {config.storage.backend}")
    db_path = Path(config.storage.sqlite_path)
    if not db_path.is_absolute():
        db_path = Path(project_path) / db_path
    return runtime.storage_cls(db_path)


def add_common_config_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--project-path", default=".", help="Project root holding .cinegraph.yaml")
    cmd.add_argument("--org-config", help="Optional org defaults YAML")
    cmd.add_argument("--system-config", help="Optional system defaults YAML")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")


def add_source_flags(cmd: argparse.ArgumentParser) -> None:
    source = cmd.add_mutually_exclusive_group()
    source.add_argument("--input", help="Dataset path or URL (default: loader.primary)")
    source.add_argument("--file", help="Local dataset JSON file; no fallback is tried")
    cmd.add_argument("--fallback", help="Fallback dataset path or URL (default: loader.fallback)")
