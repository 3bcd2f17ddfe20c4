import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import APP_NAME, DEFAULT_GIT, DEFAULT_JOBS, GITHUB
from .errors import ConfigurationError
from .registry import Registry, Selection
from .repo import parse_repo_spec

logger = logging.getLogger(APP_NAME)

TOP_LEVEL_KEYS = {"directory", "git", "jobs", "repositories"}
ENTRY_KEYS = {"type", "repo", "optional"}


def parse_jobs(value: Any) -> int:
    """Validates a concurrency budget."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"jobs must be an integer, got {value!r}")
    if value < 1:
        raise ConfigurationError(f"jobs must be at least 1, got {value}")
    return value


def parse_entry(name: str, value: Any) -> Selection:
    """Turns one ``[repositories]`` entry into a selection.

    Accepts the simple form (``name = "owner/project"``) and the table form
    (``name = { type = "github", repo = "owner/project", optional = true }``).

    Args:
        name (str): The entry name; also the checkout directory.
        value (Any): The raw TOML value.

    Returns:
        Selection: The parsed selection.

    Raises:
        ConfigurationError: If the entry is malformed.
    """
    if isinstance(value, str):
        return Selection.explicit(parse_repo_spec(name, value))

    if not isinstance(value, dict):
        raise ConfigurationError(
            f"repositories.{name} must be a string or a table, got {value!r}"
        )

    unknown = set(value) - ENTRY_KEYS
    if unknown:
        logger.warning(
            f"Unknown config keys in [repositories.{name}]: "
            f"{', '.join(sorted(unknown))}. Ignoring."
        )

    spec = value.get("repo")
    if not isinstance(spec, str):
        raise ConfigurationError(f"repositories.{name}.repo must be a string")
    repo_type = value.get("type", GITHUB)
    if not isinstance(repo_type, str):
        raise ConfigurationError(f"repositories.{name}.type must be a string")
    optional = value.get("optional", False)
    if not isinstance(optional, bool):
        raise ConfigurationError(f"repositories.{name}.optional must be a boolean")

    repo = parse_repo_spec(name, spec, repo_type)
    return Selection.optional(repo) if optional else Selection.explicit(repo)


@dataclass
class Config:
    """Settings for one gitcop run.

    Attributes:
        directory (Path | None): Where the checkouts live; None means the
                                 working directory.
        git (str): The git executable.
        jobs (int): How many git operations may run at once.
        registry (Registry): The configured repositories.
    """

    directory: Path | None = None
    git: str = DEFAULT_GIT
    jobs: int = DEFAULT_JOBS
    registry: Registry = field(default_factory=Registry)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Reads and parses a TOML configuration file.

        Args:
            path (Path): The configuration file.

        Returns:
            Config: The parsed configuration.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Config syntax error in {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Could not read {path}: {e}") from e

        logger.debug(f"Loaded configuration from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Builds a configuration from already-decoded TOML data."""
        unknown = set(data) - TOP_LEVEL_KEYS
        if unknown:
            logger.warning(
                f"Unknown config keys: {', '.join(sorted(unknown))}. Ignoring."
            )

        instance = cls()

        if "directory" in data:
            if not isinstance(data["directory"], str):
                raise ConfigurationError("directory must be a string")
            instance.directory = Path(data["directory"])
        if "git" in data:
            if not isinstance(data["git"], str) or not data["git"]:
                raise ConfigurationError("git must be a non-empty string")
            instance.git = data["git"]
        if "jobs" in data:
            instance.jobs = parse_jobs(data["jobs"])

        repositories = data.get("repositories", {})
        if not isinstance(repositories, dict):
            raise ConfigurationError("[repositories] must be a table")
        # tomllib keeps document order, so declaration order survives here.
        instance.registry = Registry(
            (name, parse_entry(name, value)) for name, value in repositories.items()
        )
        return instance
