"""
Tagged expression tree for record filtering.

A query predicate is a conjunction of constraints:

  - RangeConstraint:      lower <= created_at <= upper (either bound optional)
  - MembershipConstraint: field value IN allowed values

`evaluate(expr, record)` interprets the tree against one record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple, Union

from core.fields.field_registry import LogField
from core.models.event_models import EventRecord


@dataclass(frozen=True)
class TrueExpr:
    """Matches every record."""


@dataclass(frozen=True)
class RangeConstraint:
    field: LogField
    lower: Optional[datetime] = None
    upper: Optional[datetime] = None


@dataclass(frozen=True)
class MembershipConstraint:
    field: LogField
    allowed: FrozenSet[str]


@dataclass(frozen=True)
class AndExpr:
    operands: Tuple["Expr", ...]


Expr = Union[TrueExpr, RangeConstraint, MembershipConstraint, AndExpr]


def conjoin(left: Expr, right: Expr) -> Expr:
    """AND two expressions, flattening nested conjunctions and dropping TRUE."""
    if isinstance(left, TrueExpr):
        return right
    if isinstance(right, TrueExpr):
        return left
    operands = []
    for side in (left, right):
        if isinstance(side, AndExpr):
            operands.extend(side.operands)
        else:
            operands.append(side)
    return AndExpr(tuple(operands))


def field_value(record: EventRecord, field: LogField) -> Any:
    path = field.record_path
    if path is None:
        raise ValueError(f"{field.storage_key} has no scalar value")
    value: Any = record
    for attr in path:
        value = getattr(value, attr)
    return value


def _as_text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def evaluate(expr: Expr, record: EventRecord) -> bool:
    if isinstance(expr, TrueExpr):
        return True
    if isinstance(expr, AndExpr):
        return all(evaluate(operand, record) for operand in expr.operands)
    if isinstance(expr, RangeConstraint):
        value = field_value(record, expr.field)
        if expr.lower is not None and value < expr.lower:
            return False
        if expr.upper is not None and value > expr.upper:
            return False
        return True
    if isinstance(expr, MembershipConstraint):
        return _as_text(field_value(record, expr.field)) in expr.allowed
    raise TypeError(f"Unsupported expression: {expr!r}")


def describe(expr: Expr) -> str:
    """Human-readable form, used in debug logging."""
    if isinstance(expr, TrueExpr):
        return "TRUE"
    if isinstance(expr, AndExpr):
        return " AND ".join(describe(operand) for operand in expr.operands)
    if isinstance(expr, RangeConstraint):
        parts = []
        if expr.lower is not None:
            parts.append(f"{expr.field.storage_key} >= {expr.lower.isoformat()}")
        if expr.upper is not None:
            parts.append(f"{expr.field.storage_key} <= {expr.upper.isoformat()}")
        return " AND ".join(parts) or "TRUE"
    if isinstance(expr, MembershipConstraint):
        return f"{expr.field.storage_key} IN {sorted(expr.allowed)!r}"
    raise TypeError(f"Unsupported expression: {expr!r}")
