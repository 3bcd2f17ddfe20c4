"""Bounded-concurrency execution of git operations.

Every operation becomes one asyncio task that waits for a permit from a
shared pool, runs to completion, and hands the permit back. The pool caps how
many git processes run at once; the join barrier returns only once every task
has finished.
"""

import asyncio
import enum
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from pathlib import Path

from .constants import APP_NAME, DEFAULT_JOBS
from .git_wrapper import GitCmd, OperationOutcome
from .output import Output
from .registry import SyncTarget

logger = logging.getLogger(APP_NAME)

Operation = Callable[[], Awaitable[OperationOutcome]]


class TaskState(enum.Enum):
    """Lifecycle of a dispatched operation."""

    NOT_STARTED = "not_started"
    PERMIT_HELD = "permit_held"
    RUNNING = "running"
    DONE = "done"


class PermitPool:
    """A counting pool of fungible permits.

    Attributes:
        capacity (int): The total number of permits.
        in_use (int): Permits currently held.
    """

    def __init__(self, capacity: int):
        """Initializes the pool with every permit available.

        Args:
            capacity (int): The number of permits.

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"Permit pool capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.in_use = 0
        self._semaphore = asyncio.Semaphore(capacity)

    @property
    def available(self) -> int:
        return self.capacity - self.in_use

    @asynccontextmanager
    async def permit(self) -> AsyncIterator[None]:
        """Holds one permit for the duration of the ``async with`` block."""
        await self._semaphore.acquire()
        self.in_use += 1
        try:
            yield
        finally:
            self.in_use -= 1
            self._semaphore.release()


class Dispatcher:
    """Runs operations concurrently, never more than ``jobs`` at a time.

    Attributes:
        jobs (int): The concurrency budget.
        on_state (Callable[[int, TaskState], None] | None): Optional observer
            called whenever an operation changes state.
        pool (PermitPool | None): The permit pool of the current or last run.
    """

    def __init__(
        self,
        jobs: int = DEFAULT_JOBS,
        on_state: Callable[[int, TaskState], None] | None = None,
    ):
        """Initializes the dispatcher.

        Args:
            jobs (int, optional): The concurrency budget. Defaults to 10.
            on_state (Callable[[int, TaskState], None] | None, optional):
                Observer for operation state changes. Defaults to None.

        Raises:
            ValueError: If jobs is less than 1.
        """
        if jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {jobs}")
        self.jobs = jobs
        self.on_state = on_state
        self.pool: PermitPool | None = None

    async def run(
        self, operations: Iterable[tuple[str, Operation]]
    ) -> list[OperationOutcome]:
        """Runs every ``(key, operation)`` pair and waits for all of them.

        A fresh permit pool is created for each run.

        Args:
            operations (Iterable[tuple[str, Operation]]): The work to run. Each
                operation is called only once its permit is held.

        Returns:
            list[OperationOutcome]: One outcome per operation.
        """
        pool = self.pool = PermitPool(self.jobs)
        tasks = [
            self._bounded(pool, index, key, operation)
            for index, (key, operation) in enumerate(operations)
        ]
        logger.debug(f"Dispatching {len(tasks)} operations, {self.jobs} at a time")
        return list(await asyncio.gather(*tasks))

    async def _bounded(
        self, pool: PermitPool, index: int, key: str, operation: Operation
    ) -> OperationOutcome:
        self._notify(index, TaskState.NOT_STARTED)

        async with pool.permit():
            self._notify(index, TaskState.PERMIT_HELD)
            logger.debug(f"Permit acquired for {key} ({pool.in_use}/{self.jobs})")
            self._notify(index, TaskState.RUNNING)
            try:
                outcome = await operation()
            except Exception as e:
                logger.error(f"Unexpected error while syncing {key}: {e}")
                outcome = OperationOutcome.failure(key, str(e))

        logger.debug(f"Permit released for {key}")
        self._notify(index, TaskState.DONE)
        return outcome

    def _notify(self, index: int, state: TaskState) -> None:
        if self.on_state is not None:
            self.on_state(index, state)


def sync_operation(target: SyncTarget, git: GitCmd, output: Output) -> Operation:
    """Builds the clone-or-pull operation for one target.

    Whether to clone or pull is decided when the operation starts, not when it
    is scheduled. A directory created or removed by someone else in between can
    still send it down the wrong branch.
    """

    async def operation() -> OperationOutcome:
        if target.directory.is_dir():
            return await git.pull(target.directory, output)
        return await git.clone(target.directory, target.repo, output)

    return operation


def pull_operation(directory: Path, git: GitCmd, output: Output) -> Operation:
    """Builds the fast-forward pull operation for one existing directory."""

    async def operation() -> OperationOutcome:
        return await git.pull(directory, output)

    return operation


def run_sync(
    targets: Iterable[SyncTarget],
    git: GitCmd,
    output: Output,
    jobs: int = DEFAULT_JOBS,
) -> list[OperationOutcome]:
    """Clones or pulls every target on a fresh event loop.

    Args:
        targets (Iterable[SyncTarget]): The resolved targets.
        git (GitCmd): The git runner.
        output (Output): Where git output is printed.
        jobs (int, optional): The concurrency budget. Defaults to 10.

    Returns:
        list[OperationOutcome]: One outcome per target.
    """
    dispatcher = Dispatcher(jobs)
    operations = [(t.key, sync_operation(t, git, output)) for t in targets]
    return asyncio.run(dispatcher.run(operations))


def run_pull(
    directories: Iterable[Path],
    git: GitCmd,
    output: Output,
    jobs: int = DEFAULT_JOBS,
) -> list[OperationOutcome]:
    """Fast-forward pulls every directory on a fresh event loop."""
    dispatcher = Dispatcher(jobs)
    operations = [(str(d), pull_operation(d, git, output)) for d in directories]
    return asyncio.run(dispatcher.run(operations))
