"""Preference command."""

from __future__ import annotations

import argparse

from cinegraph.commands.common import CommandRuntime, load_config, open_store
from cinegraph.controller import load_layout_mode, save_layout_mode
from cinegraph.models import LayoutMode


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    store = open_store(config, runtime, args.project_path)

    if args.set_mode:
        save_layout_mode(store, LayoutMode(args.set_mode))

    mode = load_layout_mode(store, config.controls.default_mode)
    print(f"layout_mode: {mode.value}")
    return 0
