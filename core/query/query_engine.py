"""
core.query.query_engine

Filter, sort, cap and paginate committed records.

Pipeline:
  1. build_predicate(config): conjunction of the created_at bounds and one
     membership constraint per filter entry. Every filter field is resolved
     through the field registry; an unknown name fails the whole query.
  2. keep the matching records, sort by created_at descending (ties keep
     commit order), take the first `events_count`.
  3. chunk into pages of `page_size` (page_size <= 0 means a single page).

The engine works on an immutable sequence handed in by the caller and
returns only after the full result is built.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, TypeVar

from core.fields.field_registry import LogField, resolve_filter_field
from core.models.event_models import EventRecord
from core.query.filter_config import FilterConfiguration
from core.query.predicates import (
    Expr,
    MembershipConstraint,
    RangeConstraint,
    TrueExpr,
    conjoin,
    describe,
    evaluate,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

Page = List[EventRecord]


def build_predicate(config: FilterConfiguration) -> Expr:
    """Build the conjunctive predicate for a filter configuration.

    Raises
    ------
    UnknownField
        If a filter entry names a field outside the registry (or a
        container field that cannot be matched).
    """
    expr: Expr = TrueExpr()
    if config.logs_after is not None or config.logs_before is not None:
        expr = conjoin(
            expr,
            RangeConstraint(
                field=LogField.CREATED_AT,
                lower=config.logs_after,
                upper=config.logs_before,
            ),
        )
    for name, values in config.constraints():
        field = resolve_filter_field(name)
        expr = conjoin(expr, MembershipConstraint(field=field, allowed=frozenset(values)))
    return expr


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Split `items` into consecutive chunks of `size`.

    size <= 0 returns one chunk holding everything; empty input returns
    no chunks.
    """
    if not items:
        return []
    if size <= 0:
        return [list(items)]
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def run_query(records: Sequence[EventRecord], config: FilterConfiguration) -> List[Page]:
    """Evaluate `config` against `records` (given in commit order)."""
    predicate = build_predicate(config)
    logger.debug("[QUERY] predicate: %s", describe(predicate))

    if config.events_count == 0:
        return []

    matches = [record for record in records if evaluate(predicate, record)]
    # list.sort is stable, so equal timestamps stay in commit order.
    matches.sort(key=lambda record: record.created_at, reverse=True)
    capped = matches[: config.events_count]
    pages = chunked(capped, config.page_size)

    logger.debug(
        "[QUERY] %d of %d records matched, returning %d in %d page(s)",
        len(matches),
        len(records),
        len(capped),
        len(pages),
    )
    return pages
