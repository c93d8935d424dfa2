"""Boolean operators over ordered, duplicate-free lists of node ids."""

from typing import Any


def op_or(left: list[Any], right: list[Any]) -> list[Any]:
    """Union: left, followed by the ids of right not already in left."""
    seen = set(left)
    result = list(left)
    for node_id in right:
        if node_id not in seen:
            seen.add(node_id)
            result.append(node_id)
    return result


def op_and(left: list[Any], right: list[Any]) -> list[Any]:
    """Intersection: ids of left also in right, in left's order."""
    keep = set(right)
    return [node_id for node_id in left if node_id in keep]


def op_and_not(left: list[Any], right: list[Any]) -> list[Any]:
    """Difference: ids of left not in right, in left's order."""
    drop = set(right)
    return [node_id for node_id in left if node_id not in drop]
