import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text

from . import commands
from .config import Config, parse_jobs
from .constants import APP_NAME, CONFIG_FILE_NAME
from .errors import ConfigurationError
from .output import Output

logger = logging.getLogger(APP_NAME)
err_console = Console(stderr=True, highlight=False)


def setup_logging(verbose: bool) -> None:
    """Configures the logging subsystem.

    Args:
        verbose (bool): If True, debug messages are shown as well.
    """
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )
    logger.handlers.clear()
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _jobs_arg(value: str) -> int:
    try:
        return parse_jobs(int(value))
    except (ValueError, ConfigurationError) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    """Builds the command line parser."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME, description="Keep a set of git checkouts up to date."
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path(CONFIG_FILE_NAME),
        help=f"Configuration file (default: {CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=_jobs_arg,
        help="Maximum number of concurrent git operations (default: 10)",
    )
    parser.add_argument("--git", help="Path to the git executable")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync", help="Clone missing repos and fast-forward existing ones"
    )
    sync_parser.add_argument("repos", nargs="*", metavar="REPO", help="Repo names")

    pull_parser = subparsers.add_parser(
        "pull", help="Fast-forward existing checkouts"
    )
    pull_parser.add_argument("dirs", nargs="*", metavar="DIR", help="Directories")

    subparsers.add_parser("list", help="List configured repos")
    subparsers.add_parser("unknown", help="List directories not in the config")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the gitcop CLI.

    Returns:
        int: The process exit status.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = Config.load(args.config)
    except ConfigurationError as e:
        err_console.print(Text.assemble((f"{APP_NAME}:", "bold red"), f" {e}"))
        return 2

    if args.jobs is not None:
        config.jobs = args.jobs
    if args.git:
        config.git = args.git
    if config.directory is not None:
        try:
            os.chdir(config.directory)
        except OSError as e:
            err_console.print(Text.assemble((f"{APP_NAME}:", "bold red"), f" {e}"))
            return 2

    output = Output()

    if args.command == "sync":
        return 0 if commands.sync(config, args.repos, output) else 1
    elif args.command == "pull":
        return 0 if commands.pull(config, args.dirs, output) else 1
    elif args.command == "list":
        commands.list_repos(config, output)
        return 0
    elif args.command == "unknown":
        return 0 if commands.list_unknown(config, output) else 1

    return 2


def run() -> None:
    """Console script wrapper around :func:`main`."""
    sys.exit(main())


if __name__ == "__main__":
    run()
