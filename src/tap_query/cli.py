"""Command-line interface for tap-query."""

import argparse
import logging
import sys
from dataclasses import replace as dataclass_replace
from datetime import datetime
from importlib.metadata import version
from typing import Any

from .attributes import attribute_count, find_data_nodes
from .config import DEFAULT_FUZZY_THRESHOLD, MatchConfig, load_config, write_config
from .errors import InvalidPathError, QueryError
from .filter import Filter
from .output import ColorFormatter, ResultPrinter
from .timeline import Timeline
from .tree import TraversableTree, load_tree

PROGRAM_NAME = "tap-query"

def parse_time(value: str) -> datetime:
    """Parse an ISO 8601 time argument.

    Raises:
        argparse.ArgumentTypeError: If value is not an ISO 8601 time
    """
    try:
        time = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 time: {value!r}")
    if time.tzinfo is None:
        raise argparse.ArgumentTypeError(
            f"time needs a UTC offset, e.g. {value}T00:00:00+00:00: {value!r}"
        )
    return time

def path_nodes(tree: TraversableTree, path: str | None) -> list[Any] | None:
    """Return the nodes below path, or None (whole tree) when path is None.

    Raises:
        InvalidPathError: If path does not exist in tree
    """
    if path is None:
        return None
    nodes = tree.children_rec(path)
    if nodes is None:
        raise InvalidPathError(f"Invalid path {path!r}")
    return nodes

def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Select nodes of a JSON node tree with a query expression.",
        epilog=(
            "Connectives 'or', 'and' and 'and not' have equal precedence and "
            "are applied left to right; use parentheses to group."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {version(PROGRAM_NAME)}",
    )

    parser.add_argument(
        "tree_file",
        metavar="TREE",
        nargs="?",
        help="JSON file describing the node tree",
    )
    parser.add_argument(
        "query",
        metavar="QUERY",
        nargs="?",
        help="query expression, e.g. \"name == w'*.jpg' and data == t'Canon'\"",
    )
    parser.add_argument(
        "-P",
        "--path",
        metavar="TREE_PATH",
        help="only consider nodes below this tree path",
    )

    # Reports that run instead of a query
    parser.add_argument(
        "--timeline",
        nargs=2,
        metavar=("MIN_TIME", "MAX_TIME"),
        type=parse_time,
        help="list datetime attributes between two ISO 8601 times",
    )
    parser.add_argument(
        "--count-attributes",
        action="store_true",
        help="print the number of attributes in the tree",
    )
    parser.add_argument(
        "--data-nodes",
        action="store_true",
        help="list the nodes that have content",
    )

    # Matching options
    parser.add_argument(
        "--config",
        metavar="CONFIG_FILE",
        help="configuration file (default: searched in standard locations)",
    )
    parser.add_argument(
        "--fuzzy-threshold",
        metavar="SCORE",
        type=float,
        help=f"minimum fuzzy match score between 0 and 1 (default: {DEFAULT_FUZZY_THRESHOLD})",
    )
    parser.add_argument(
        "--ignore-case-wildcard",
        action="store_true",
        default=False,
        help="match wildcard patterns case-insensitively",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="colorize output (default: %(default)s)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="enable debug logging",
    )

    parser.add_argument(
        "--setup",
        action="store_true",
        help="store the provided matching options in a configuration file",
    )

    return parser

def build_config(args: argparse.Namespace) -> MatchConfig:
    """Load the configuration and apply CLI overrides."""
    config = load_config(args.config)
    if args.fuzzy_threshold is not None:
        config = dataclass_replace(config, fuzzy_threshold=args.fuzzy_threshold)
    if args.ignore_case_wildcard:
        config = dataclass_replace(config, wildcard_case_sensitive=False)
    return config

def run_setup(args: argparse.Namespace, printer: ResultPrinter) -> None:
    """Run the setup command.

    Args:
        args: Parsed command-line arguments
        printer: Printer for the confirmation message
    """
    config = MatchConfig(
        fuzzy_threshold=(
            args.fuzzy_threshold if args.fuzzy_threshold is not None else DEFAULT_FUZZY_THRESHOLD
        ),
        wildcard_case_sensitive=not args.ignore_case_wildcard,
    )
    config_path = write_config(args.config, config)
    printer.print_success(f"Successfully wrote config to {config_path}")

def run_query(args: argparse.Namespace, printer: ResultPrinter) -> None:
    """Run a query or report on the tree.

    Args:
        args: Parsed command-line arguments
        printer: Printer for the results
    """
    logger = logging.getLogger(__name__)
    config = build_config(args)
    logger.debug("Using configuration %s", config)
    tree = load_tree(args.tree_file)

    if args.count_attributes:
        printer.print_count("attributes", attribute_count(tree, path_nodes(tree, args.path)))
    if args.data_nodes:
        printer.print_nodes(tree, find_data_nodes(tree, path_nodes(tree, args.path)))
    if args.timeline:
        min_time, max_time = args.timeline
        if args.path:
            times = Timeline.path(tree, args.path, min_time, max_time)
        else:
            times = Timeline.tree(tree, min_time, max_time)
        printer.print_timeline(tree, times)
    if args.query:
        if args.path:
            nodes = Filter.path(tree, args.query, args.path, config)
        else:
            nodes = Filter.tree(tree, args.query, config)
        printer.print_nodes(tree, nodes)

def configure_logging(debug: bool) -> None:
    """Configure logging based on debug flag.

    Args:
        debug: Whether to enable debug logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )

def main() -> None:
    parser = create_argument_parser()
    args = parser.parse_args()

    configure_logging(args.debug)
    printer = ResultPrinter(ColorFormatter(args.color))

    if args.setup:
        run_setup(args, printer)
        return

    has_report = args.query or args.timeline or args.count_attributes or args.data_nodes
    if not args.tree_file or not has_report:
        parser.print_help()
        sys.exit(1)

    try:
        run_query(args, printer)
    except QueryError as e:
        printer.print_error(e)
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
