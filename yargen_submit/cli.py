import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .config import SubmitConfig
from .errors import ServerUnreachableError, SubmitError
from .submit import submit_sample

logger = logging.getLogger("yargen_submit")


def _env_log_level() -> int:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def _configure_logging(verbose: bool) -> None:
    root_level = _env_log_level()
    logging.basicConfig(level=root_level, format="%(message)s", stream=sys.stderr, force=True)
    # progress lines follow -v only; errors always print
    if verbose:
        logger.setLevel(min(root_level, logging.INFO))
    else:
        logger.setLevel(logging.WARNING)
    # keep per-request lines from httpx out of the progress output
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser(defaults: SubmitConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="yargen-util", description="Client utility for the yarGen server.")
    commands = parser.add_subparsers(dest="command", required=True)

    submit = commands.add_parser("submit", help="Submit a sample to the yarGen server and get rules")
    submit.add_argument("sample", help="Sample file to generate rules for")
    submit.add_argument("--server", default=defaults.server_url, help="yarGen server URL (default: %(default)s)")
    submit.add_argument("-a", "--author", default=defaults.author, help="Author name (default: %(default)s)")
    submit.add_argument("-r", "--reference", default="", help="Reference")
    submit.add_argument("--score", action="store_true", help="Show scores as comments")
    submit.add_argument("--no-opcodes", action="store_true", help="Disable opcode analysis")
    submit.add_argument("-o", "--output", default="", help="Output file (default: stdout)")
    submit.add_argument(
        "--wait", type=int, default=defaults.max_wait, help="Maximum wait time in seconds (default: %(default)s)"
    )
    submit.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    commands.add_parser("version", help="Show version")
    return parser


def cmd_submit(args: argparse.Namespace, defaults: SubmitConfig) -> int:
    _configure_logging(args.verbose)
    try:
        config = replace(defaults, server_url=args.server, author=args.author, max_wait=args.wait)
        submit_sample(
            args.sample,
            config,
            reference=args.reference or None,
            show_scores=args.score,
            exclude_opcodes=args.no_opcodes,
            output=args.output or None,
        )
    except ServerUnreachableError as exc:
        logger.error("[E] %s", exc)
        logger.error("    Start with: yargen serve")
        return 1
    except (SubmitError, ValueError) as exc:
        logger.error("[E] %s", exc)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        defaults = SubmitConfig.from_env()
    except ValueError as exc:
        print(f"[E] Invalid configuration: {exc}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    if args.command == "version":
        print(f"yargen-util version {__version__}")
        return 0
    return cmd_submit(args, defaults)


if __name__ == "__main__":
    sys.exit(main())
