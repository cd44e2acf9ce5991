"""CLI parser construction."""

from __future__ import annotations

import argparse

from cinegraph.commands.common import add_common_config_flags, add_source_flags
from cinegraph.models import LayoutMode, NodeType

MODE_CHOICES = [mode.value for mode in LayoutMode]
FILTER_CHOICES = ["all", *(node_type.value for node_type in NodeType)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="cinegraph movie metadata graph")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--trace-ticks", action="store_true", help="Emit per-tick simulation debug logs")

    sub = parser.add_subparsers(dest="command", required=True)

    layout = sub.add_parser("layout", aliases=["run"], help="Settle a layout and write a snapshot bundle")
    add_source_flags(layout)
    layout.add_argument("--mode", choices=MODE_CHOICES, help="Layout mode (default: stored preference)")
    layout.add_argument(
        "--link-strength",
        type=int,
        help="Link strength slider value 0-1000 (default: controls.default_link_strength)",
    )
    layout.add_argument("--filter", choices=FILTER_CHOICES, default="all", help="Node type to highlight")
    layout.add_argument("--max-ticks", type=int, help="Tick cap (default: simulation.max_ticks)")
    layout.add_argument("--output-dir", default="./cinegraph-out", help="Output directory")
    add_common_config_flags(layout)

    inspect = sub.add_parser("inspect", aliases=["stats"], help="Summarize a dataset and its per-mode edge counts")
    add_source_flags(inspect)
    inspect.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    add_common_config_flags(inspect)

    prefs = sub.add_parser("prefs", aliases=["preferences"], help="Show or change stored preferences")
    prefs.add_argument("--set-mode", choices=MODE_CHOICES, help="Persist a layout mode")
    add_common_config_flags(prefs)

    return parser
