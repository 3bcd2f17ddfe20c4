"""Exception hierarchy for gitcop.

Only configuration errors are ever raised out of the core. Lookup misses and
failed git operations are returned as values so a single bad repository never
stops the rest of a run.
"""


class GitcopError(Exception):
    """Base class for all gitcop errors."""


class ConfigurationError(GitcopError):
    """The configuration cannot be used; the run aborts before any git work."""


class InvalidRepoSpec(ConfigurationError):
    """A repository spec is not of the form ``owner`` or ``owner/project``."""

    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(f"invalid repo name: {spec}")


class UnsupportedRepoType(ConfigurationError):
    """A repository declares a hosting type other than GitHub."""

    def __init__(self, repo_type: str):
        self.repo_type = repo_type
        super().__init__(f"unknown repo type: {repo_type}")
