"""Error types raised while parsing and evaluating queries."""

from enum import Enum, auto


class ErrorKind(Enum):
    """Machine-readable category of a query failure."""

    SYNTAX = auto()
    UNKNOWN_AXIS = auto()
    INVALID_PATTERN = auto()
    ATTRIBUTE_LOOKUP = auto()
    DATA_UNAVAILABLE = auto()
    INVALID_PATH = auto()


class QueryError(Exception):
    """Base class for every failure of a query.

    Attributes:
        kind: Category of the failure
        message: Human-readable description
        position: Offset in the query text, when the failure has one
    """

    kind = ErrorKind.SYNTAX

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class QuerySyntaxError(QueryError):
    """Token or grammar mismatch in the query text."""

    kind = ErrorKind.SYNTAX


class UnknownAxisError(QueryError):
    """A word in axis position is not one of the known axes."""

    kind = ErrorKind.UNKNOWN_AXIS


class InvalidPatternError(QueryError):
    """A regex or wildcard literal could not be compiled."""

    kind = ErrorKind.INVALID_PATTERN


class AttributeLookupError(QueryError):
    """The tree failed while enumerating the attributes of a node."""

    kind = ErrorKind.ATTRIBUTE_LOOKUP


class DataUnavailableError(QueryError):
    """The content of a node could not be read because of an I/O failure."""

    kind = ErrorKind.DATA_UNAVAILABLE


class InvalidPathError(QueryError):
    """A tree path given to a filter or timeline does not exist."""

    kind = ErrorKind.INVALID_PATH
