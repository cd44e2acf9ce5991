"""Layout snapshot command."""

from __future__ import annotations

import argparse
import logging
import sys

from cinegraph.commands.common import CommandRuntime, load_config, open_store
from cinegraph.controller import FilterModeController
from cinegraph.reporting import write_snapshot_bundle
from cinegraph.session import Visualizer
from cinegraph.view import SnapshotBindings

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    store = open_store(config, runtime, args.project_path)

    bindings = SnapshotBindings()
    visualizer = Visualizer(config, bindings)
    controller = FilterModeController(visualizer, store)
    if args.mode:
        controller.set_mode(args.mode)
    if args.link_strength is not None and not controller.set_link_strength(args.link_strength):
        logger.warning("Link strength is ignored in %s mode", controller.mode.value)

    loaded = visualizer.load_file(args.file) if args.file else visualizer.load_default(args.input, args.fallback)
    if not loaded:
        print(bindings.status, file=sys.stderr)
        return 1
    controller.set_type_filter(args.filter)

    ticks = visualizer.run(args.max_ticks)
    session = visualizer.session
    converged = session.simulation.converged
    if not converged:
        visualizer.zoom_to_fit()

    frame = visualizer.render()
    out = write_snapshot_bundle(
        frame,
        session.dataset,
        args.output_dir,
        converged=converged,
        width=config.viewport.width,
        height=config.viewport.height,
        status=bindings.statuses[0] if bindings.statuses else "",
    )
    logger.info(
        "Layout complete: mode=%s nodes=%s links=%s ticks=%s converged=%s output=%s",
        controller.mode.value,
        len(session.graph.nodes),
        len(session.engine.active_links),
        ticks,
        converged,
        out,
    )
    return 0
