"""Global constants for gitcop.

This module defines the application identifier, the configuration file name,
and the defaults used when the configuration leaves a setting out.
"""

# --- Identity ---
APP_NAME = "gitcop"
"""str: The human-readable application name (also the logger name)."""

# --- Configuration ---
CONFIG_FILE_NAME = ".gitcop.toml"
"""str: The configuration file looked up in the working directory."""

DEFAULT_JOBS = 10
"""int: The default number of git operations allowed to run at once."""

DEFAULT_GIT = "git"
"""str: The git executable, resolved from PATH unless configured."""

# --- Remotes ---
GITHUB = "github"
"""str: The only supported repository hosting type."""

GITHUB_URL = "https://github.com/{owner}/{project}.git"
"""str: The remote URL template for GitHub repositories."""
