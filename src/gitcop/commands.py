import logging
from collections.abc import Sequence
from pathlib import Path

from .config import Config
from .constants import APP_NAME
from .dispatcher import run_pull, run_sync
from .git_wrapper import GitCmd, OperationOutcome
from .output import Output, good, warn
from .registry import Resolved
from .report import Report

logger = logging.getLogger(APP_NAME)


def sync(config: Config, names: Sequence[str], output: Output) -> bool:
    """Clones missing repositories and fast-forwards existing ones.

    Args:
        config (Config): The loaded configuration.
        names (Sequence[str]): Repositories to sync; empty means all of them,
                               with optional ones skipped unless present.
        output (Output): Where progress and the report are printed.

    Returns:
        bool: True if every operation succeeded and every name was found.
    """
    targets, not_found = config.registry.targets(list(names) or None)
    logger.info(f"Syncing {len(targets)} repositories")

    outcomes = run_sync(targets, GitCmd(config.git), output, jobs=config.jobs)

    report = Report.collect(outcomes, not_found)
    report.render(output, "sync")
    return report.ok


def pull(config: Config, directories: Sequence[str], output: Output) -> bool:
    """Fast-forward pulls existing checkouts.

    With no directories given, every configured repository that is present on
    disk is pulled. Directories that do not exist are reported and counted as
    failures. Paths naming the same directory are pulled once.
    """
    if directories:
        candidates = [Path(d) for d in directories]
    else:
        candidates = [Path(name) for name in config.registry if Path(name).is_dir()]

    present: list[Path] = []
    missing: list[OperationOutcome] = []
    seen: set[Path] = set()
    for path in candidates:
        resolved = path.resolve()
        if resolved in seen:
            logger.debug(f"Ignoring repeated directory: {path}")
            continue
        seen.add(resolved)

        if path.is_dir():
            present.append(path)
        else:
            output.line(warn(str(path)), ": No such directory")
            missing.append(OperationOutcome.failure(str(path), "No such directory"))

    logger.info(f"Pulling {len(present)} repositories")
    outcomes = run_pull(present, GitCmd(config.git), output, jobs=config.jobs)

    report = Report.collect(missing + outcomes)
    report.render(output, "pull")
    return report.ok


def list_repos(config: Config, output: Output) -> None:
    """Prints every configured repository with a presence mark and its URL.

    Marks: ``*`` present, ``-`` missing, ``o`` optional and present, blank for
    optional and missing.
    """
    for item in config.registry.resolve():
        if not isinstance(item, Resolved):
            continue
        exists = Path(item.name).is_dir()
        if item.selection.is_optional:
            mark = "o" if exists else " "
        else:
            mark = "*" if exists else "-"
        output.line(good(mark), f" {item.name:<19} {item.selection.repo.url()}")


def list_unknown(config: Config, output: Output, base: Path | None = None) -> bool:
    """Prints subdirectories of ``base`` that no configured repository owns.

    Hidden directories are left out.

    Returns:
        bool: False if the directory could not be read.
    """
    base = base or Path(".")
    try:
        entries = sorted(p.name for p in base.iterdir() if p.is_dir())
    except OSError as e:
        logger.error(f"Unable to read directory: {e}")
        return False

    for name in entries:
        if not config.registry.is_known(name) and not name.startswith("."):
            output.line(name)
    return True
