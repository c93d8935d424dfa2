"""Query entry points: evaluate a query over nodes, a whole tree or a subtree."""

import logging
from typing import Any

from .config import MatchConfig
from .errors import InvalidPathError
from .expression import EvalContext
from .parser import parse_query
from .tree import NodeTree, TraversableTree

logger = logging.getLogger(__name__)


def evaluate(
    tree: NodeTree,
    candidates: list[Any],
    query: str,
    config: MatchConfig | None = None,
) -> list[Any]:
    """Select the candidates matching query.

    The query is parsed completely before any node is visited; each leaf is
    then evaluated against the full candidate list and the results are
    combined left to right.

    Args:
        tree: Tree the candidates belong to
        candidates: Ordered node ids to select from
        query: Query text
        config: Matching dialect configuration, defaults when None

    Returns:
        Ordered list of matching node ids, a subset of candidates

    Raises:
        QueryError: On a malformed query or a failing leaf; no partial
                    result is returned
    """
    expression = parse_query(query)
    if config is None:
        config = MatchConfig()

    # Duplicate candidates would break the set operators.
    candidates = list(dict.fromkeys(candidates))
    logger.debug(
        "Evaluating %d leaf queries over %d candidates",
        len(expression.get_leaves()),
        len(candidates),
    )
    result = expression.evaluate(EvalContext(tree, candidates, config))
    logger.debug("Query %r matched %d nodes", query, len(result))
    return result


class Filter:
    """Apply queries to node lists, whole trees or subtrees."""

    @staticmethod
    def nodes(
        tree: NodeTree,
        query: str,
        nodes: list[Any],
        config: MatchConfig | None = None,
    ) -> list[Any]:
        """Apply query to nodes and return the matching ones."""
        return evaluate(tree, nodes, query, config)

    @staticmethod
    def tree(
        tree: TraversableTree,
        query: str,
        config: MatchConfig | None = None,
    ) -> list[Any]:
        """Apply query to every node of tree recursively."""
        return evaluate(tree, tree.children_rec(None) or [], query, config)

    @staticmethod
    def path(
        tree: TraversableTree,
        query: str,
        path: str,
        config: MatchConfig | None = None,
    ) -> list[Any]:
        """Apply query to every node found recursively below path.

        Raises:
            InvalidPathError: If path does not exist in tree
        """
        nodes = tree.children_rec(path)
        if nodes is None:
            raise InvalidPathError(f"Invalid path {path!r}")
        return evaluate(tree, nodes, query, config)
