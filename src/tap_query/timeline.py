"""Build a timeline from the datetime attributes of nodes."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .attributes import flatten_attributes, node_attributes
from .errors import InvalidPathError
from .tree import TraversableTree

logger = logging.getLogger(__name__)


def is_aware(time: datetime) -> bool:
    """Return True if time carries a UTC offset."""
    return time.utcoffset() is not None


@dataclass
class TimeInfo:
    """One datetime attribute of a node."""

    time: datetime
    attribute_name: str
    id: Any


class Timeline:
    """Collect the datetime attributes of nodes inside a time window.

    A node produces one TimeInfo per datetime attribute in the window;
    nested attributes are reported with their dotted name. The window is
    inclusive on both ends.
    """

    @staticmethod
    def tree(tree: TraversableTree, min_time: datetime, max_time: datetime) -> list[TimeInfo]:
        """Timeline of every node of tree."""
        return Timeline.nodes(tree, tree.children_rec(None) or [], min_time, max_time)

    @staticmethod
    def path(
        tree: TraversableTree, path: str, min_time: datetime, max_time: datetime
    ) -> list[TimeInfo]:
        """Timeline of every node found recursively below path.

        Raises:
            InvalidPathError: If path does not exist in tree
        """
        nodes = tree.children_rec(path)
        if nodes is None:
            raise InvalidPathError(f"Invalid path {path!r}")
        return Timeline.nodes(tree, nodes, min_time, max_time)

    @staticmethod
    def nodes(
        tree: TraversableTree, nodes: list[Any], min_time: datetime, max_time: datetime
    ) -> list[TimeInfo]:
        """Timeline of nodes, sorted by time.

        Attributes that are naive when the window is aware (or the other way
        round) cannot be placed in the window and are skipped.
        """
        aware = is_aware(min_time)
        if is_aware(max_time) != aware:
            raise ValueError("min_time and max_time must both be naive or both be aware")

        times = []
        skipped = 0
        for node_id in nodes:
            if not tree.exists(node_id):
                continue
            for name, value in flatten_attributes(node_attributes(tree, node_id)):
                if not isinstance(value, datetime):
                    continue
                if is_aware(value) != aware:
                    skipped += 1
                    continue
                if min_time <= value <= max_time:
                    times.append(TimeInfo(value, name, node_id))

        if skipped:
            logger.debug("Skipped %d datetime attributes not comparable to the window", skipped)

        times.sort(key=lambda info: info.time)
        logger.debug("Timeline has %d entries from %d nodes", len(times), len(nodes))
        return times
