"""Name and attribute matching strategies."""

import difflib
import fnmatch
import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .attributes import attribute_names, flatten_attributes, format_value, node_attributes
from .config import MatchConfig
from .errors import InvalidPatternError
from .tree import NodeTree

logger = logging.getLogger(__name__)


class MatchMethod(Enum):
    """How a literal is compared to a name or value."""

    FIXED = auto()  # exact string
    WILDCARD = auto()  # fnmatch glob
    REGEX = auto()  # re.search
    FUZZY = auto()  # difflib alignment above a threshold


class QueryType(Enum):
    """Which string of a node a name query is tested against."""

    NAME = auto()
    ATTRIBUTE_NAME = auto()


def fuzzy_score(pattern: str, value: str) -> float:
    """Fraction of the pattern's characters found, in order, in value.

    Comparison is case-insensitive; "jpg" scores 1.0 against "photo.JPG".
    """
    if not pattern:
        return 1.0
    matcher = difflib.SequenceMatcher(None, pattern.lower(), value.lower(), autojunk=False)
    matched = sum(block.size for block in matcher.get_matching_blocks())
    return matched / len(pattern)


@dataclass
class Matcher:
    """A literal compiled for one match method.

    Build with Matcher.compile so that invalid patterns fail before any
    node is visited.
    """

    method: MatchMethod
    query: str
    config: MatchConfig
    regex: re.Pattern[str] | None = None

    @classmethod
    def compile(cls, method: MatchMethod, query: str, config: MatchConfig) -> "Matcher":
        """Create a matcher for query.

        Raises:
            InvalidPatternError: If query is not a valid pattern for method
        """
        regex = None
        try:
            if method == MatchMethod.REGEX:
                regex = re.compile(query)
            elif method == MatchMethod.WILDCARD:
                flags = 0 if config.wildcard_case_sensitive else re.IGNORECASE
                regex = re.compile(fnmatch.translate(query), flags)
        except re.error as e:
            raise InvalidPatternError(
                f"Invalid {method.name.lower()} pattern {query!r}: {e}"
            ) from e
        return cls(method, query, config, regex)

    def is_match(self, value: str) -> bool:
        """Check if value matches the compiled query."""
        if self.method == MatchMethod.FIXED:
            return value == self.query
        if self.method == MatchMethod.REGEX:
            return self.regex.search(value) is not None
        if self.method == MatchMethod.WILDCARD:
            return self.regex.match(value) is not None
        return fuzzy_score(self.query, value) >= self.config.fuzzy_threshold


def match_query(
    tree: NodeTree,
    nodes: list[Any],
    query_type: QueryType,
    method: MatchMethod,
    value: str,
    config: MatchConfig,
) -> list[Any]:
    """Return the nodes whose name (or one attribute name) matches value.

    Args:
        tree: Tree the nodes belong to
        nodes: Candidate node ids
        query_type: NAME tests the node name, ATTRIBUTE_NAME every dotted
                    attribute name of the node
        method: Match method applied to value
        value: Query literal
        config: Matching dialect configuration

    Returns:
        Matching node ids in candidate order

    Raises:
        InvalidPatternError: If value is not a valid pattern
        AttributeLookupError: If attributes of a node cannot be read
    """
    matcher = Matcher.compile(method, value, config)

    result = []
    for node_id in nodes:
        if not tree.exists(node_id):
            continue
        if query_type == QueryType.NAME:
            is_match = matcher.is_match(tree.name(node_id))
        else:
            is_match = any(
                matcher.is_match(name)
                for name in attribute_names(node_attributes(tree, node_id))
            )
        if is_match:
            result.append(node_id)

    logger.debug(
        "%s %s %r matched %d of %d nodes",
        query_type.name, method.name, value, len(result), len(nodes),
    )
    return result


def match_attribute_query(
    tree: NodeTree,
    nodes: list[Any],
    name: str,
    name_method: MatchMethod,
    value: str,
    value_method: MatchMethod,
    config: MatchConfig,
) -> list[Any]:
    """Return the nodes having an attribute whose name and value both match.

    The name and value are compared with their own match methods. A node
    matches when at least one of its leaf attributes satisfies both.
    Unlike the attribute.name axis of match_query, nested attribute sets
    themselves (such as "exif") are not candidates here: only leaves carry
    a value to compare.

    Raises:
        InvalidPatternError: If name or value is not a valid pattern
        AttributeLookupError: If attributes of a node cannot be read
    """
    name_matcher = Matcher.compile(name_method, name, config)
    value_matcher = Matcher.compile(value_method, value, config)

    result = []
    for node_id in nodes:
        if not tree.exists(node_id):
            continue
        selected = [
            attr_value
            for attr_name, attr_value in flatten_attributes(node_attributes(tree, node_id))
            if name_matcher.is_match(attr_name)
        ]
        if any(value_matcher.is_match(format_value(v)) for v in selected):
            result.append(node_id)

    logger.debug(
        "attribute %s %r == %s %r matched %d of %d nodes",
        name_method.name, name, value_method.name, value, len(result), len(nodes),
    )
    return result
