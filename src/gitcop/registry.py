import enum
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType

from .constants import APP_NAME
from .repo import GitHubRepo

logger = logging.getLogger(APP_NAME)


class SelectionKind(enum.Enum):
    """How a configured repository takes part in an untargeted sync."""

    EXPLICIT = "explicit"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class Selection:
    """A repository descriptor tagged with its selection kind.

    Explicit selections are always synced. Optional selections are only synced
    when their directory already exists, unless they are requested by name.

    Attributes:
        repo (GitHubRepo): The repository to sync.
        kind (SelectionKind): Whether the entry is explicit or optional.
    """

    repo: GitHubRepo
    kind: SelectionKind = SelectionKind.EXPLICIT

    @classmethod
    def explicit(cls, repo: GitHubRepo) -> "Selection":
        return cls(repo, SelectionKind.EXPLICIT)

    @classmethod
    def optional(cls, repo: GitHubRepo) -> "Selection":
        return cls(repo, SelectionKind.OPTIONAL)

    @property
    def is_optional(self) -> bool:
        return self.kind is SelectionKind.OPTIONAL

    def as_explicit(self) -> "Selection":
        """Returns this selection with the optional gating removed."""
        return replace(self, kind=SelectionKind.EXPLICIT)


@dataclass(frozen=True)
class Resolved:
    """A registry entry yielded by :meth:`Registry.resolve`."""

    name: str
    selection: Selection


@dataclass(frozen=True)
class NotFound:
    """A requested name with no registry entry."""

    name: str

    def __str__(self) -> str:
        return f"{self.name}: repository not found"


@dataclass(frozen=True)
class SyncTarget:
    """A self-contained unit of sync work: where to sync, and what.

    Attributes:
        directory (Path): The checkout directory.
        repo (GitHubRepo): The repository to clone into it when it is absent.
    """

    directory: Path
    repo: GitHubRepo

    @property
    def key(self) -> str:
        return str(self.directory)


class Registry(Mapping[str, Selection]):
    """Ordered, read-only mapping of repository names to selections.

    Built once from configuration; declaration order is kept and drives the
    order of untargeted traversal.
    """

    def __init__(self, entries: Iterable[tuple[str, Selection]] = ()):
        """Initializes the registry from (name, selection) pairs.

        Args:
            entries (Iterable[tuple[str, Selection]], optional): The entries in
                declaration order. Defaults to no entries.

        Raises:
            ValueError: If a name appears more than once.
        """
        items: dict[str, Selection] = {}
        for name, selection in entries:
            if name in items:
                raise ValueError(f"Duplicate repository name: {name}")
            items[name] = selection
        self._entries = MappingProxyType(items)

    def __getitem__(self, name: str) -> Selection:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Registry({list(self._entries.items())!r})"

    def is_known(self, name: str) -> bool:
        return name in self._entries

    def resolve(
        self, names: Iterable[str] | None = None
    ) -> Iterator[Resolved | NotFound]:
        """Lazily resolves the registry into entries to act on.

        With no names every entry is yielded in declaration order, optional
        entries still tagged optional. With names, each one is looked up in the
        order given: hits are forced to explicit, misses yield ``NotFound`` and
        resolution carries on with the next name.

        Args:
            names (Iterable[str] | None): Names to target, or None for all.

        Yields:
            Resolved | NotFound: One item per entry (or per requested name).
        """
        if names is None:
            for name, selection in self._entries.items():
                yield Resolved(name, selection)
            return

        for name in names:
            selection = self._entries.get(name)
            if selection is None:
                logger.debug(f"Requested repository not configured: {name}")
                yield NotFound(name)
            else:
                yield Resolved(name, selection.as_explicit())

    def targets(
        self, names: Iterable[str] | None = None, base: Path | None = None
    ) -> tuple[list[SyncTarget], list[NotFound]]:
        """Resolves the registry into sync targets and lookup misses.

        Optional entries are dropped unless their directory exists right now.
        Entries requested by name are never dropped. A name requested more
        than once is only targeted the first time.

        Args:
            names (Iterable[str] | None): Names to target, or None for all.
            base (Path | None): Directory the entry names are relative to.
                                Defaults to the working directory.

        Returns:
            tuple[list[SyncTarget], list[NotFound]]: The targets in resolution
            order and the names that were not found.
        """
        base = base or Path(".")
        targets: list[SyncTarget] = []
        missing: list[NotFound] = []
        seen: set[str] = set()

        for item in self.resolve(names):
            if item.name in seen:
                logger.debug(f"Ignoring repeated repository name: {item.name}")
                continue
            seen.add(item.name)

            if isinstance(item, NotFound):
                missing.append(item)
                continue

            directory = base / item.name
            if item.selection.is_optional and not directory.is_dir():
                logger.debug(f"Skipping optional repository {item.name}: not present")
                continue
            targets.append(SyncTarget(directory, item.selection.repo))

        return targets, missing
