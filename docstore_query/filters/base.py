#!/usr/bin/env python3
"""
Base expression builder.
Provides the shared compile pipeline for filter clauses; each backend
supplies its own operator table and predicate shapes.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ..exceptions import UnsupportedOperatorError
from ..models import CompiledExpression, FilterClause, Operator
from .validator import validate_field_name, validate_value

FilterInput = Union[FilterClause, Mapping[str, Any]]


class ExpressionBuilder(ABC):
    """
    Compiles an ordered list of filter clauses into a CompiledExpression.

    Subclasses implement the backend specifics (operator predicates,
    identifier conversion); the validation and ordering rules live here.
    """

    # Sort directions
    ASCENDING = 1
    DESCENDING = -1

    def __init__(self, pk_name: str = "id", native_key: str = "_id"):
        """
        Args:
            pk_name: Public identifier field name
            native_key: Backend's primary-key field name
        """
        self.pk_name = pk_name
        self.native_key = native_key

    def build_filter_expression(self, filters: Iterable[FilterInput]) -> CompiledExpression:
        """
        Compile filter clauses into a CompiledExpression.

        Every value, field name and operator is validated before any
        condition is built, so a rejected clause never yields a partial
        expression.
        Multiple clauses on one field overwrite each other (last write wins).

        Args:
            filters: FilterClause objects or {"field", "operator", "value"} dicts

        Returns:
            A fresh CompiledExpression; empty conditions match everything

        Raises:
            ValidationError: If a value contains a reserved key
            FieldNameError: If a field name contains the reserved prefix
            UnsupportedOperatorError: If an operator is not in the table
        """
        clauses = [FilterClause.from_dict(f) for f in filters]
        if not clauses:
            return CompiledExpression(conditions={})

        for clause in clauses:
            validate_value(clause.value)
        for clause in clauses:
            validate_field_name(clause.field)
        for clause in clauses:
            if not self.supports_operator(clause.operator):
                raise UnsupportedOperatorError(str(clause.operator))

        conditions = {}
        key_clause, remaining = self.extract_key_filter(clauses)

        if key_clause is not None:
            field, value = self.rewrite_identifier(key_clause.field, key_clause.operator, key_clause.value)
            conditions[field] = self.build_sub_expression(field, key_clause.operator, value)

        for clause in remaining:
            field, value = self.rewrite_identifier(clause.field, clause.operator, clause.value)
            conditions[field] = self.build_sub_expression(field, clause.operator, value)

        return CompiledExpression(conditions=conditions)

    def extract_key_filter(self, clauses: List[FilterClause]) -> Tuple[Optional[FilterClause], List[FilterClause]]:
        """Split off the first clause on the public identifier."""
        for index, clause in enumerate(clauses):
            if clause.field == self.pk_name:
                return clause, clauses[:index] + clauses[index + 1:]
        return None, list(clauses)

    def apply_sort(self, expression: CompiledExpression,
                   sort_by: Optional[str],
                   sort_direction: Optional[str] = None) -> CompiledExpression:
        """
        Attach a single-field sort; descending only for "desc".

        Sorting on the public identifier sorts on the native key.
        """
        if sort_by:
            validate_field_name(sort_by)
            if sort_by == self.pk_name:
                sort_by = self.native_key
            direction = self.DESCENDING if sort_direction == "desc" else self.ASCENDING
            expression.sort = {sort_by: direction}
        return expression

    @abstractmethod
    def supports_operator(self, operator: Union[Operator, str]) -> bool:
        """Check if this backend can compile an operator."""
        pass

    @abstractmethod
    def rewrite_identifier(self, field: str, operator: Union[Operator, str],
                           value: Any) -> Tuple[str, Any]:
        """
        Map a filter on the public identifier to the native key.

        Returns:
            (field, value) to compile; unchanged when no rewrite applies
        """
        pass

    @abstractmethod
    def build_sub_expression(self, field: str, operator: Union[Operator, str], value: Any) -> Any:
        """
        Build the backend predicate for one clause.

        Raises:
            UnsupportedOperatorError: If the operator is not in the table
        """
        pass
