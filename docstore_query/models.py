"""
Data models for docstore-query.
Request, compiled-query and response types shared by all components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from .exceptions import UnsupportedOperatorError

T = TypeVar("T")


class Operator(Enum):
    """Filter operators accepted in a FilterClause."""
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    EQ = "="
    NE = "!="
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"
    NOT_LIKE = "not_like"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid operator."""
        try:
            cls.from_string(value)
        except UnsupportedOperatorError:
            return False
        return True

    @classmethod
    def from_string(cls, value: Union[str, 'Operator']) -> 'Operator':
        """
        Convert an operator literal to an Operator.

        The spaced spellings "not in" and "not like" are accepted as
        aliases of NOT_IN and NOT_LIKE.

        Raises:
            UnsupportedOperatorError: If the literal is not in the table
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            literal = _OPERATOR_ALIASES.get(value, value)
            for op in cls:
                if op.value == literal:
                    return op
        raise UnsupportedOperatorError(str(value))


_OPERATOR_ALIASES = {
    "not in": "not_in",
    "not like": "not_like",
}


@dataclass(frozen=True)
class FilterClause:
    """One field/operator/value triple in a filter request."""
    field: str
    operator: Union[Operator, str]
    value: Any = None

    @classmethod
    def from_dict(cls, data: Union['FilterClause', Mapping[str, Any]]) -> 'FilterClause':
        if isinstance(data, cls):
            return data
        return cls(
            field=data.get("field"),
            operator=data.get("operator"),
            value=data.get("value"),
        )

    def __repr__(self):
        op = self.operator.value if isinstance(self.operator, Operator) else self.operator
        return f"{self.field} {op} {self.value!r}"


@dataclass(frozen=True)
class PaginationQuery:
    """
    Pagination and sort directives.

    Values are kept exactly as supplied; validate_pagination() decides
    whether they are acceptable.
    """
    page: Any = None
    limit: Any = None
    offset: Any = None
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Union['PaginationQuery', Mapping[str, Any], None]) -> 'PaginationQuery':
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        return cls(
            page=data.get("page"),
            limit=data.get("limit"),
            offset=data.get("offset"),
            sort_by=data.get("sortBy", data.get("sort_by")),
            sort_direction=data.get("sortDirection", data.get("sort_direction")),
        )


@dataclass(frozen=True)
class GenericFilterQuery:
    """Input of a paginated fetch: filters plus pagination."""
    filters: List[FilterClause] = field(default_factory=list)
    pagination: PaginationQuery = field(default_factory=PaginationQuery)

    @classmethod
    def from_dict(cls, data: Union['GenericFilterQuery', Mapping[str, Any], None]) -> 'GenericFilterQuery':
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        filters = data.get("filters") or []
        return cls(
            filters=[FilterClause.from_dict(f) for f in filters],
            pagination=PaginationQuery.from_dict(data.get("pagination")),
        )


@dataclass
class CompiledExpression:
    """
    Backend-native query object.

    conditions maps field -> backend predicate; sort maps field -> 1 or -1.
    """
    conditions: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[Dict[str, int]] = None
    limit: Optional[int] = None
    skip: Optional[int] = None


@dataclass
class PaginatedResponse(Generic[T]):
    """One page of results."""
    data: List[T]
    total: int
    page: int
    limit: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": list(self.data),
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
        }
