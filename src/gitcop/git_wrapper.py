import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from .constants import APP_NAME, DEFAULT_GIT
from .output import Output
from .repo import GitHubRepo

logger = logging.getLogger(APP_NAME)


@dataclass(frozen=True)
class OperationOutcome:
    """The result of one git operation against one directory.

    Attributes:
        key (str): The directory the operation ran against.
        ok (bool): Whether the operation succeeded.
        message (str): Why the operation failed; empty on success.
    """

    key: str
    ok: bool
    message: str = ""

    @classmethod
    def success(cls, key: str) -> "OperationOutcome":
        return cls(key, True)

    @classmethod
    def failure(cls, key: str, message: str) -> "OperationOutcome":
        return cls(key, False, message)


class GitCmd:
    """Runs clone and pull as git subprocesses on the running event loop.

    Each call launches exactly one git process, waits for it without blocking
    the loop, then prints everything it wrote as one block.

    Attributes:
        path (str): The git executable to run.
    """

    def __init__(self, path: str = DEFAULT_GIT):
        """Initializes the runner.

        Args:
            path (str, optional): The git executable. Defaults to "git",
                                  resolved from PATH.
        """
        self.path = path

    def __repr__(self) -> str:
        return f"GitCmd({self.path!r})"

    async def clone(
        self, directory: Path, repo: GitHubRepo, output: Output
    ) -> OperationOutcome:
        """Clones ``repo`` into ``directory``.

        Args:
            directory (Path): The checkout directory to create.
            repo (GitHubRepo): The repository to clone.
            output (Output): Where the git output is printed.

        Returns:
            OperationOutcome: The classified result.
        """
        args = ["-c", "color.ui=always", "clone", repo.url(), str(directory)]
        return await self._run(str(directory), args, output)

    async def pull(self, directory: Path, output: Output) -> OperationOutcome:
        """Fast-forward pulls the checkout at ``directory``.

        Args:
            directory (Path): An existing checkout.
            output (Output): Where the git output is printed.

        Returns:
            OperationOutcome: The classified result.
        """
        args = ["-c", "color.ui=always", "pull", "--ff-only"]
        return await self._run(str(directory), args, output, cwd=directory)

    async def _run(
        self, key: str, args: list[str], output: Output, cwd: Path | None = None
    ) -> OperationOutcome:
        """Executes one git command and classifies how it ended.

        Launch failures and undecodable output are reported as failures rather
        than raised.
        """
        logger.debug(f"Running {self.path} {' '.join(args)} for {key}")
        try:
            process = await asyncio.create_subprocess_exec(
                self.path,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
            stdout_data, stderr_data = await process.communicate()
        except OSError as e:
            output.block(key, str(e), success=False)
            return OperationOutcome.failure(key, str(e))

        success = process.returncode == 0
        try:
            body = stdout_data.decode("utf-8") + stderr_data.decode("utf-8")
        except UnicodeDecodeError as e:
            output.block(key, "", success=False)
            return OperationOutcome.failure(key, f"invalid output encoding: {e}")

        output.block(key, body, success)
        if success:
            return OperationOutcome.success(key)
        return OperationOutcome.failure(key, f"exit status: {process.returncode}")
