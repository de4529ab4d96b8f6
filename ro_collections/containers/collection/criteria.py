"""
Criteria objects for querying collections by field values.

A `Criteria` bundles a boolean filter expression, a list of orderings, and an optional window
(`first_result` / `max_results`). It is an opaque value for code that merely passes it along;
collections implementing `Queryable.matching()` evaluate it against their elements.

Expressions are built with `Criteria.expr()`:

    >>> expr = Criteria.expr()
    >>> criteria = (
    ...     Criteria()
    ...     .where(expr.and_x(expr.gte("age", 18), expr.starts_with("name", "A")))
    ...     .order_by({"age": Order.DESC})
    ...     .set_max_results(10)
    ... )

Fields are read from mapping elements by key and from any other element by attribute.
"""

from __future__ import annotations
import abc
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import operator
from typing import Any, Callable, Iterable, Self


class Order(Enum):
    ASC = "ASC"
    DESC = "DESC"


_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "IN": lambda field_value, value: field_value in value,
    "NIN": lambda field_value, value: field_value not in value,
    "IS": operator.is_,
    "CONTAINS": lambda field_value, value: value in field_value,
    "STARTS_WITH": lambda field_value, value: str(field_value).startswith(value),
    "ENDS_WITH": lambda field_value, value: str(field_value).endswith(value),
}


def read_field(element: object, field: str) -> Any:
    """
    Reads a named field from an element.

    Args:
        element (object):
            A mapping (read by key) or any other object (read by attribute).
        field (str):
            The field name.

    Returns:
        Any:
            The field value.

    Raises:
        KeyError: If a mapping element has no such key.
        AttributeError: If a non-mapping element has no such attribute.
    """
    if isinstance(element, Mapping):
        return element[field]
    return getattr(element, field)


class Expression(abc.ABC):
    """
    Base class of all filter expressions.
    """

    @abc.abstractmethod
    def evaluate(self, element: object) -> bool:
        """
        Returns True if the element satisfies this expression.
        """


@dataclass(frozen=True)
class Comparison(Expression):
    """
    Compares one field of an element against a fixed value.

    Attributes:
        field (str):
            Name of the field to read from each element.
        op (str):
            One of the supported operators: `=`, `<>`, `<`, `<=`, `>`, `>=`, `IN`, `NIN`, `IS`,
            `CONTAINS`, `STARTS_WITH`, `ENDS_WITH`.
        value (Any):
            The right-hand side of the comparison.
    """
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in _COMPARATORS:
            raise ValueError(f"Unsupported comparison operator {self.op!r}")

    def evaluate(self, element: object) -> bool:
        return _COMPARATORS[self.op](read_field(element, self.field), self.value)


@dataclass(frozen=True)
class CompositeExpression(Expression):
    """
    Combines sub-expressions with `AND` or `OR`.

    An empty `AND` matches everything and an empty `OR` matches nothing.
    """
    kind: str
    expressions: tuple[Expression, ...]

    AND = "AND"
    OR = "OR"

    def __post_init__(self):
        if self.kind not in (CompositeExpression.AND, CompositeExpression.OR):
            raise ValueError(f"Unsupported composite expression type {self.kind!r}")

    def evaluate(self, element: object) -> bool:
        if self.kind == CompositeExpression.AND:
            return all(expr.evaluate(element) for expr in self.expressions)
        return any(expr.evaluate(element) for expr in self.expressions)


class ExpressionBuilder:
    """
    Factory for `Comparison` and `CompositeExpression` instances.
    """

    def and_x(self, *expressions: Expression) -> CompositeExpression:
        return CompositeExpression(CompositeExpression.AND, expressions)

    def or_x(self, *expressions: Expression) -> CompositeExpression:
        return CompositeExpression(CompositeExpression.OR, expressions)

    def eq(self, field: str, value: Any) -> Comparison:
        return Comparison(field, "=", value)

    def neq(self, field: str, value: Any) -> Comparison:
        return Comparison(field, "<>", value)

    def lt(self, field: str, value: Any) -> Comparison:
        return Comparison(field, "<", value)

    def lte(self, field: str, value: Any) -> Comparison:
        return Comparison(field, "<=", value)

    def gt(self, field: str, value: Any) -> Comparison:
        return Comparison(field, ">", value)

    def gte(self, field: str, value: Any) -> Comparison:
        return Comparison(field, ">=", value)

    def in_(self, field: str, values: Iterable[Any]) -> Comparison:
        return Comparison(field, "IN", tuple(values))

    def not_in(self, field: str, values: Iterable[Any]) -> Comparison:
        return Comparison(field, "NIN", tuple(values))

    def is_null(self, field: str) -> Comparison:
        return Comparison(field, "IS", None)

    def contains(self, field: str, value: Any) -> Comparison:
        return Comparison(field, "CONTAINS", value)

    def starts_with(self, field: str, value: str) -> Comparison:
        return Comparison(field, "STARTS_WITH", value)

    def ends_with(self, field: str, value: str) -> Comparison:
        return Comparison(field, "ENDS_WITH", value)


class Criteria:
    """
    A query specification: filter expression, orderings, and result window.

    The setters return the instance itself so that criteria can be built fluently.

    Attributes:
        where_expression (Expression | None):
            The filter; `None` matches every element.
        orderings (dict[str, Order]):
            Sort keys in priority order (first entry is the primary key).
        first_result (int | None):
            Number of leading matches to skip.
        max_results (int | None):
            Maximum number of matches to return.
    """

    _expression_builder: ExpressionBuilder | None = None

    def __init__(
        self,
        where: Expression | None = None,
        orderings: Mapping[str, Order | str] | None = None,
        first_result: int | None = None,
        max_results: int | None = None,
    ):
        self.where_expression = where
        self.orderings: dict[str, Order] = {}
        if orderings is not None:
            self.order_by(orderings)
        self.first_result = first_result
        self.max_results = max_results

    @classmethod
    def expr(cls) -> ExpressionBuilder:
        """
        Returns the shared expression builder.
        """
        if cls._expression_builder is None:
            cls._expression_builder = ExpressionBuilder()
        return cls._expression_builder

    def where(self, expression: Expression) -> Self:
        self.where_expression = expression
        return self

    def and_where(self, expression: Expression) -> Self:
        if self.where_expression is None:
            return self.where(expression)
        self.where_expression = CompositeExpression(
            CompositeExpression.AND, (self.where_expression, expression)
        )
        return self

    def or_where(self, expression: Expression) -> Self:
        if self.where_expression is None:
            return self.where(expression)
        self.where_expression = CompositeExpression(
            CompositeExpression.OR, (self.where_expression, expression)
        )
        return self

    def order_by(self, orderings: Mapping[str, Order | str]) -> Self:
        """
        Replaces the orderings.

        Args:
            orderings (Mapping[str, Order | str]):
                Field name to direction. Directions may be given as `Order` members or as the
                case-insensitive strings "ASC" / "DESC".

        Returns:
            Self:
                This criteria.

        Raises:
            ValueError: If a direction string is not ASC or DESC.
        """
        self.orderings = {
            field: direction if isinstance(direction, Order) else Order(direction.upper())
            for field, direction in orderings.items()
        }
        return self

    def set_first_result(self, first_result: int | None) -> Self:
        self.first_result = first_result
        return self

    def set_max_results(self, max_results: int | None) -> Self:
        self.max_results = max_results
        return self

    def __repr__(self) -> str:
        return (
            f"Criteria(where={self.where_expression!r}, orderings={self.orderings!r}, "
            f"first_result={self.first_result!r}, max_results={self.max_results!r})"
        )
