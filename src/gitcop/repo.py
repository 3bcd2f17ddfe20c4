import re
from dataclasses import dataclass

from .constants import GITHUB, GITHUB_URL
from .errors import InvalidRepoSpec, UnsupportedRepoType

SPEC_PATTERN = re.compile(r"([^/]+)(?:/([^/]+))?")


@dataclass(frozen=True)
class GitHubRepo:
    """Identity of a repository hosted on GitHub.

    Attributes:
        owner (str): The user or organisation owning the repository.
        project (str): The repository name.
    """

    owner: str
    project: str

    @property
    def kind(self) -> str:
        return GITHUB

    def url(self) -> str:
        """Renders the HTTPS clone URL for this repository."""
        return GITHUB_URL.format(owner=self.owner, project=self.project)


def parse_repo_spec(key: str, spec: str, repo_type: str = GITHUB) -> GitHubRepo:
    """Resolves a repository spec declared under ``key`` into a descriptor.

    The spec is either ``owner/project`` or a bare ``owner``, in which case the
    project name defaults to ``key``.

    Args:
        key (str): The registry name the spec was declared under.
        spec (str): The ``owner[/project]`` string.
        repo_type (str, optional): The declared hosting type. Defaults to GitHub.

    Returns:
        GitHubRepo: The resolved descriptor.

    Raises:
        UnsupportedRepoType: If ``repo_type`` is not ``github``.
        InvalidRepoSpec: If the spec has more than one ``/`` or an empty segment.
    """
    if repo_type != GITHUB:
        raise UnsupportedRepoType(repo_type)

    match = SPEC_PATTERN.fullmatch(spec)
    if not match:
        raise InvalidRepoSpec(spec)

    owner, project = match.group(1), match.group(2)
    return GitHubRepo(owner=owner, project=project or key)
