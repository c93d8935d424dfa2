"""Search in the raw content of nodes."""

import logging
import re
from enum import Enum, auto
from typing import Any

from .config import MatchConfig
from .errors import DataUnavailableError, InvalidPatternError
from .tree import NodeTree

logger = logging.getLogger(__name__)


class DataMethod(Enum):
    """How a literal is searched for in node content."""

    TEXT = auto()  # substring, in every configured text encoding
    REGEX = auto()  # bytes regex


def compile_data_regex(query: str, config: MatchConfig) -> re.Pattern[bytes]:
    """Compile query as a bytes regex using the configured flags.

    "\\x.." escapes can be used to search for binary content.

    Raises:
        InvalidPatternError: If query is not a valid regex
    """
    flags = 0
    if config.data_regex_ignore_case:
        flags |= re.IGNORECASE
    if config.data_regex_dotall:
        flags |= re.DOTALL
    try:
        return re.compile(query.encode("utf-8"), flags)
    except re.error as e:
        raise InvalidPatternError(f"Invalid data regex {query!r}: {e}") from e


def encode_text(query: str, config: MatchConfig) -> list[bytes]:
    """Return query encoded in each configured text encoding, without duplicates."""
    needles = []
    for encoding in config.text_encodings:
        needle = query.encode(encoding)
        if needle not in needles:
            needles.append(needle)
    return needles


def read_data(tree: NodeTree, node_id: Any) -> bytes | None:
    """Return the content of a node, None if it has none.

    Raises:
        DataUnavailableError: If the content cannot be read
    """
    try:
        return tree.data(node_id)
    except OSError as e:
        raise DataUnavailableError(f"Cannot read data of node {node_id!r}: {e}") from e


def query_data(
    tree: NodeTree,
    nodes: list[Any],
    query_value: str,
    data_method: DataMethod,
    config: MatchConfig,
) -> list[Any]:
    """Return the nodes whose content matches query_value.

    Nodes without content are skipped.

    Raises:
        InvalidPatternError: If query_value is not a valid regex
        DataUnavailableError: If the content of a node cannot be read
    """
    if data_method == DataMethod.REGEX:
        pattern = compile_data_regex(query_value, config)

        def is_match(content: bytes) -> bool:
            return pattern.search(content) is not None
    else:
        needles = encode_text(query_value, config)

        def is_match(content: bytes) -> bool:
            return any(needle in content for needle in needles)

    result = []
    skipped = 0
    for node_id in nodes:
        if not tree.exists(node_id):
            continue
        content = read_data(tree, node_id)
        if content is None:
            skipped += 1
            continue
        if is_match(content):
            result.append(node_id)

    logger.debug(
        "data %s %r matched %d of %d nodes (%d without data)",
        data_method.name, query_value, len(result), len(nodes), skipped,
    )
    return result
