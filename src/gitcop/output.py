import threading

from rich.console import Console
from rich.text import Text


def good(text: str) -> Text:
    """Styles ``text`` as a success marker."""
    return Text(text, style="green")


def warn(text: str) -> Text:
    """Styles ``text`` as a failure marker."""
    return Text(text, style="red")


class Output:
    """Serialized access to the terminal.

    Many git operations finish concurrently; every write goes through one lock
    so a block of output is never interleaved with another.

    Attributes:
        console (Console): The rich console written to.
    """

    def __init__(self, console: Console | None = None):
        """Initializes the sink.

        Args:
            console (Console | None, optional): The console to write to.
                                                Defaults to a new stdout console.
        """
        self.console = console or Console(highlight=False)
        self._lock = threading.Lock()

    def line(self, *parts: str | Text) -> None:
        """Prints one line assembled from plain strings and styled text."""
        with self._lock:
            self.console.print(Text.assemble(*parts))

    def block(self, key: str, body: str, success: bool) -> None:
        """Prints the captured output of one git operation as a single block.

        Args:
            key (str): The directory the operation ran against.
            body (str): The combined stdout and stderr, possibly ANSI-coloured.
            success (bool): Whether the operation succeeded.
        """
        tag = good(key) if success else warn(key)
        text = Text.assemble("[", tag, "] ", Text.from_ansi(body.rstrip("\n")))
        with self._lock:
            self.console.print(text)
