"""Node tree interfaces and an in-memory implementation."""

import base64
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"
DATETIME_TAG = "$datetime"


class NodeTree(ABC):
    """Read-only view of a tree that queries are evaluated against.

    Node ids are opaque to the query engine but must be hashable, since
    candidate lists are deduplicated and combined through sets.
    """

    @abstractmethod
    def exists(self, node_id: Any) -> bool:
        """Return True if node_id refers to a node of this tree."""

    @abstractmethod
    def name(self, node_id: Any) -> str:
        """Return the name of a node."""

    @abstractmethod
    def attributes(self, node_id: Any) -> Iterable[tuple[str, Any]]:
        """Enumerate the (key, value) attribute pairs of a node.

        A value that is a mapping is a nested attribute set.
        """

    @abstractmethod
    def data(self, node_id: Any) -> bytes | None:
        """Return the raw content of a node, or None if it has none.

        Raises:
            OSError: If the content exists but cannot be read
        """


class TraversableTree(NodeTree):
    """Tree that can also enumerate its nodes and report their paths."""

    @abstractmethod
    def children_rec(self, path: str | None = None) -> list[Any] | None:
        """Return all nodes below path recursively (whole tree for None).

        Returns:
            Node ids in depth-first order, or None if path does not exist
        """

    @abstractmethod
    def node_path(self, node_id: Any) -> str:
        """Return the absolute path of a node."""


@dataclass
class MemoryNode:
    """Node stored by MemoryTree."""
    name: str
    parent: int | None
    attributes: dict[str, Any] = field(default_factory=dict)
    data: bytes | Path | None = None
    children: list[int] = field(default_factory=list)


class MemoryTree(TraversableTree):
    """Tree held in memory, with integer node ids in insertion order.

    Node content is either bytes or a filesystem Path read on demand.
    """

    ROOT = 0

    def __init__(self, root_name: str = "root"):
        self._nodes: list[MemoryNode] = [MemoryNode(root_name, None)]

    @property
    def root(self) -> int:
        return self.ROOT

    def add_child(
        self,
        parent: int,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        data: bytes | str | Path | None = None,
    ) -> int:
        """Add a node below parent and return its id."""
        if not self.exists(parent):
            raise KeyError(f"Unknown parent node {parent!r}")
        if isinstance(data, str):
            data = data.encode("utf-8")
        node_id = len(self._nodes)
        self._nodes.append(MemoryNode(name, parent, dict(attributes or {}), data))
        self._nodes[parent].children.append(node_id)
        return node_id

    def exists(self, node_id: Any) -> bool:
        return (
            isinstance(node_id, int)
            and not isinstance(node_id, bool)
            and 0 <= node_id < len(self._nodes)
        )

    def name(self, node_id: Any) -> str:
        return self._nodes[node_id].name

    def attributes(self, node_id: Any) -> Iterable[tuple[str, Any]]:
        return list(self._nodes[node_id].attributes.items())

    def data(self, node_id: Any) -> bytes | None:
        content = self._nodes[node_id].data
        if isinstance(content, Path):
            return content.read_bytes()
        return content

    def children_rec(self, path: str | None = None) -> list[Any] | None:
        if path is None:
            start = self.root
        else:
            start = self.find(path)
            if start is None:
                return None
        result = []
        stack = list(reversed(self._nodes[start].children))
        while stack:
            node_id = stack.pop()
            result.append(node_id)
            stack.extend(reversed(self._nodes[node_id].children))
        return result

    def node_path(self, node_id: Any) -> str:
        parts = []
        current = node_id
        while current is not None and current != self.root:
            node = self._nodes[current]
            parts.append(node.name)
            current = node.parent
        return PATH_SEPARATOR + PATH_SEPARATOR.join(reversed(parts))

    def find(self, path: str) -> int | None:
        """Return the id of the node at path, or None if there is none.

        The root may be named explicitly ("/root/a") or omitted ("/a").
        """
        parts = [p for p in path.split(PATH_SEPARATOR) if p]
        if parts and parts[0] == self._nodes[self.root].name:
            parts = parts[1:]
        current = self.root
        for part in parts:
            for child in self._nodes[current].children:
                if self._nodes[child].name == part:
                    current = child
                    break
            else:
                return None
        return current

    def __len__(self) -> int:
        return len(self._nodes)


def _decode_value(value: Any) -> Any:
    """Convert JSON attribute values, turning tagged datetimes into datetime."""
    if isinstance(value, dict):
        if set(value) == {DATETIME_TAG}:
            return datetime.fromisoformat(value[DATETIME_TAG])
        return {k: _decode_value(v) for k, v in value.items()}
    return value


def _decode_data(data: Any, base_dir: Path) -> bytes | Path | None:
    if data is None:
        return None
    if isinstance(data, str):
        return data.encode("utf-8")
    if "base64" in data:
        return base64.b64decode(data["base64"])
    if "file" in data:
        return base_dir / data["file"]
    raise ValueError(f"Unsupported data description: {data!r}")


def tree_from_dict(description: Mapping[str, Any], base_dir: Path | None = None) -> MemoryTree:
    """Build a MemoryTree from a nested node description.

    Args:
        description: Mapping with "name", and optional "attributes", "data"
                     and "children" keys
        base_dir: Directory that relative {"file": ...} data paths refer to

    Returns:
        Populated MemoryTree
    """
    if base_dir is None:
        base_dir = Path.cwd()
    tree = MemoryTree(description.get("name", "root"))
    root = tree._nodes[tree.root]
    root.attributes = _decode_value(dict(description.get("attributes", {})))
    root.data = _decode_data(description.get("data"), base_dir)

    stack = [(tree.root, child) for child in reversed(description.get("children", []))]
    while stack:
        parent, node = stack.pop()
        node_id = tree.add_child(
            parent,
            node["name"],
            _decode_value(dict(node.get("attributes", {}))),
        )
        tree._nodes[node_id].data = _decode_data(node.get("data"), base_dir)
        stack.extend((node_id, child) for child in reversed(node.get("children", [])))

    logger.debug("Loaded tree with %d nodes", len(tree))
    return tree


def load_tree(file_path: str) -> MemoryTree:
    """Load a MemoryTree from a JSON file."""
    path = Path(file_path)
    with open(path) as f:
        description = json.load(f)
    return tree_from_dict(description, base_dir=path.parent)
