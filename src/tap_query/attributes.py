"""Helpers for nested node attributes addressed with dotted names."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .errors import AttributeLookupError
from .tree import NodeTree, TraversableTree

logger = logging.getLogger(__name__)


def _items(value: Any) -> Iterable[tuple[str, Any]]:
    if isinstance(value, Mapping):
        return value.items()
    return value


def flatten_attributes(
    pairs: Iterable[tuple[str, Any]], prefix: str = ""
) -> Iterator[tuple[str, Any]]:
    """Yield (dotted_name, value) for every leaf attribute.

    Args:
        pairs: (key, value) pairs, where mapping values are nested sets
        prefix: Dotted name of the enclosing attribute set

    Yields:
        Leaf attributes, nested keys joined with "."
    """
    for key, value in _items(pairs):
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            yield from flatten_attributes(value, name)
        else:
            yield name, value


def attribute_names(pairs: Iterable[tuple[str, Any]], prefix: str = "") -> Iterator[str]:
    """Yield the dotted name of every attribute, nested sets included."""
    for key, value in _items(pairs):
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            yield from attribute_names(value, name)
        yield name


def format_value(value: Any) -> str:
    """Return the string an attribute value is compared as."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def node_attributes(tree: NodeTree, node_id: Any) -> list[tuple[str, Any]]:
    """Return the attribute pairs of a node.

    Raises:
        AttributeLookupError: If the tree fails to enumerate them
    """
    try:
        return list(_items(tree.attributes(node_id)))
    except (LookupError, OSError, TypeError, ValueError) as e:
        raise AttributeLookupError(
            f"Cannot read attributes of node {node_id!r}: {e}"
        ) from e


def attribute_count(tree: TraversableTree, nodes: list[Any] | None = None) -> int:
    """Count leaf attributes of nodes (every node of the tree by default)."""
    if nodes is None:
        nodes = tree.children_rec(None) or []
    total = 0
    for node_id in nodes:
        if tree.exists(node_id):
            total += sum(1 for _ in flatten_attributes(node_attributes(tree, node_id)))
    return total


def find_data_nodes(tree: TraversableTree, nodes: list[Any] | None = None) -> list[Any]:
    """Return the nodes that have readable content.

    Nodes whose content fails to read are left out.
    """
    if nodes is None:
        nodes = tree.children_rec(None) or []
    result = []
    for node_id in nodes:
        if not tree.exists(node_id):
            continue
        try:
            if tree.data(node_id) is not None:
                result.append(node_id)
        except OSError as e:
            logger.debug("Skipping node %r with unreadable data: %s", node_id, e)
    return result
