"""gitcop: keep a declared set of git checkouts up to date.

This package resolves the configured repositories, clones or fast-forwards
each of them concurrently under a fixed concurrency budget, and reports every
failure at the end without letting one failure stop the others.
"""

from . import (
    cli,
    commands,
    config,
    constants,
    dispatcher,
    errors,
    git_wrapper,
    output,
    registry,
    repo,
    report,
)

__all__ = [
    "cli",
    "commands",
    "config",
    "constants",
    "dispatcher",
    "errors",
    "git_wrapper",
    "output",
    "registry",
    "repo",
    "report",
]
