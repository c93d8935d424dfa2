"""Expression tree for the node query language."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from .algebra import op_and, op_and_not, op_or
from .config import MatchConfig
from .data import DataMethod, query_data
from .matcher import MatchMethod, QueryType, match_attribute_query, match_query
from .tree import NodeTree


@dataclass
class EvalContext:
    """Everything a leaf needs to run: the tree, the candidates and the dialects."""

    tree: NodeTree
    candidates: list[Any]
    config: MatchConfig = field(default_factory=MatchConfig)


class ExprNode(ABC):
    """Base class for expression tree nodes."""

    @abstractmethod
    def evaluate(self, context: EvalContext) -> list[Any]:
        """Evaluate this node against the candidates of context.

        Args:
            context: Tree, candidate node ids and match configuration

        Returns:
            Ordered list of matching node ids, a subset of the candidates
        """
        pass

    @abstractmethod
    def get_leaves(self) -> list["ExprNode"]:
        """Get all leaf queries of this expression tree, left to right."""
        pass


class LeafNode(ExprNode):
    """Base class for leaves; every leaf runs against the full candidate set."""

    def get_leaves(self) -> list[ExprNode]:
        return [self]


@dataclass
class NameQuery(LeafNode):
    """Leaf matching the node name or an attribute name (name == 'x')."""

    query_type: QueryType
    value: str
    method: MatchMethod = MatchMethod.FIXED

    def evaluate(self, context: EvalContext) -> list[Any]:
        return match_query(
            context.tree,
            context.candidates,
            self.query_type,
            self.method,
            self.value,
            context.config,
        )


@dataclass
class AttributeQuery(LeafNode):
    """Leaf matching one attribute by name and value (attribute:'k' == 'v').

    name_method and value_method are independent.
    """

    name: str
    value: str
    name_method: MatchMethod = MatchMethod.FIXED
    value_method: MatchMethod = MatchMethod.FIXED

    def evaluate(self, context: EvalContext) -> list[Any]:
        return match_attribute_query(
            context.tree,
            context.candidates,
            self.name,
            self.name_method,
            self.value,
            self.value_method,
            context.config,
        )


@dataclass
class DataQuery(LeafNode):
    """Leaf searching node content (data == 'x'); REGEX unless told otherwise."""

    value: str
    method: DataMethod = DataMethod.REGEX

    def evaluate(self, context: EvalContext) -> list[Any]:
        return query_data(
            context.tree,
            context.candidates,
            self.value,
            self.method,
            context.config,
        )


@dataclass
class BinaryNode(ExprNode):
    """Connective node applying a set operator to its two children."""

    left: ExprNode
    right: ExprNode

    @staticmethod
    @abstractmethod
    def combine(left: list[Any], right: list[Any]) -> list[Any]:
        pass

    def evaluate(self, context: EvalContext) -> list[Any]:
        return self.combine(self.left.evaluate(context), self.right.evaluate(context))

    def get_leaves(self) -> list[ExprNode]:
        return self.left.get_leaves() + self.right.get_leaves()


@dataclass
class OrNode(BinaryNode):
    """Binary OR node - ordered union of children."""

    combine = staticmethod(op_or)


@dataclass
class AndNode(BinaryNode):
    """Binary AND node - ordered intersection of children."""

    combine = staticmethod(op_and)


@dataclass
class AndNotNode(BinaryNode):
    """Binary AND NOT node - left child minus right child."""

    combine = staticmethod(op_and_not)


@dataclass
class GroupNode(ExprNode):
    """Parenthesized sub-expression; evaluates to its child's result."""

    child: ExprNode

    def evaluate(self, context: EvalContext) -> list[Any]:
        return self.child.evaluate(context)

    def get_leaves(self) -> list[ExprNode]:
        return self.child.get_leaves()
