from collections.abc import Iterable
from dataclasses import dataclass, field

from .git_wrapper import OperationOutcome
from .output import Output, warn
from .registry import NotFound


@dataclass
class Report:
    """Consolidated failures of one run.

    Attributes:
        failed (list[OperationOutcome]): Failed operations, in outcome order.
        not_found (list[NotFound]): Requested names that were not configured.
    """

    failed: list[OperationOutcome] = field(default_factory=list)
    not_found: list[NotFound] = field(default_factory=list)

    @classmethod
    def collect(
        cls,
        outcomes: Iterable[OperationOutcome],
        not_found: Iterable[NotFound] = (),
    ) -> "Report":
        return cls(
            failed=[outcome for outcome in outcomes if not outcome.ok],
            not_found=list(not_found),
        )

    @property
    def failures(self) -> dict[str, str]:
        """Maps each failed directory to its failure message."""
        return {outcome.key: outcome.message for outcome in self.failed}

    @property
    def ok(self) -> bool:
        return not self.failed and not self.not_found

    def render(self, output: Output, name: str) -> None:
        """Prints the failure banner followed by one line per failure.

        Nothing is printed when the run was clean.

        Args:
            output (Output): Where to print.
            name (str): The operation name used in the banner (e.g. 'sync').
        """
        if self.ok:
            return

        output.line(f"\nThe following {name} got error!")
        for outcome in self.failed:
            output.line(warn(outcome.key), f": {outcome.message}")
        for missing in self.not_found:
            output.line(warn(missing.name), ": repository not found")
