"""Terminal output formatting with ANSI colors."""

import sys
from typing import Any

from .errors import QueryError
from .timeline import TimeInfo
from .tree import PATH_SEPARATOR, TraversableTree

class ColorFormatter:
    """Handles colored terminal output with configurable color mode."""

    # ANSI escape codes
    RED = "\033[31m"
    GREEN = "\033[32m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    def __init__(self, mode: str = "auto") -> None:
        """Initialize formatter with color mode.

        Args:
            mode: "auto", "always", or "never"
        """
        if mode == "always":
            self.use_colors = True
        elif mode == "never":
            self.use_colors = False
        else:
            self.use_colors = sys.stdout.isatty()

    def red(self, text: str) -> str:
        """Apply red color to text."""
        if not self.use_colors:
            return text
        return f"{self.RED}{text}{self.RESET}"

    def green(self, text: str) -> str:
        """Apply green color to text."""
        if not self.use_colors:
            return text
        return f"{self.GREEN}{text}{self.RESET}"

    def bold(self, text: str) -> str:
        """Apply bold formatting to text."""
        if not self.use_colors:
            return text
        return f"{self.BOLD}{text}{self.RESET}"

def highlight_name(fmt: ColorFormatter, path: str) -> str:
    """Render a node path with its last component in bold green."""
    parent, sep, name = path.rpartition(PATH_SEPARATOR)
    return f"{parent}{sep}{fmt.bold(fmt.green(name))}"

class ResultPrinter:
    """Prints query results with optional color formatting."""

    def __init__(self, formatter: ColorFormatter) -> None:
        self.fmt = formatter

    def print_nodes(self, tree: TraversableTree, nodes: list[Any]) -> None:
        """Print the path of each node, one per line."""
        for node_id in nodes:
            print(highlight_name(self.fmt, tree.node_path(node_id)))

    def print_timeline(self, tree: TraversableTree, times: list[TimeInfo]) -> None:
        """Print timeline entries as "time attribute path"."""
        for info in times:
            print(
                f"{info.time.isoformat()}\t{self.fmt.bold(info.attribute_name)}\t"
                f"{highlight_name(self.fmt, tree.node_path(info.id))}"
            )

    def print_count(self, label: str, count: int) -> None:
        print(f"{label}: {self.fmt.bold(str(count))}")

    def print_error(self, error: QueryError) -> None:
        print(
            f"Error: {self.fmt.red(error.kind.name.lower())}: {error}",
            file=sys.stderr,
        )

    def print_success(self, message: str) -> None:
        print(self.fmt.green(message))
