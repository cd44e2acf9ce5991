"""cinegraph command-line entrypoint."""

from __future__ import annotations

import logging

from cinegraph.commands import inspect as inspect_cmd
from cinegraph.commands import layout as layout_cmd
from cinegraph.commands import prefs as prefs_cmd
from cinegraph.commands.common import CommandRuntime, normalize_command
from cinegraph.commands.parser import build_parser
from cinegraph.loader import DatasetUnavailableError, InvalidDatasetFileError
from cinegraph.logging_utils import configure_logging

logger = logging.getLogger(__name__)

COMMANDS = {
    "layout": layout_cmd.run,
    "inspect": inspect_cmd.run,
    "prefs": prefs_cmd.run,
}


def main(argv: list[str] | None = None, *, runtime: CommandRuntime | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, trace_ticks=args.trace_ticks)

    handler = COMMANDS.get(normalize_command(args.command))
    if handler is None:
        parser.print_help()
        return 1
    try:
        return handler(args, runtime=runtime or CommandRuntime())
    except (DatasetUnavailableError, InvalidDatasetFileError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
