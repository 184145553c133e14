"""
Search criteria and the filter units that turn them into a SQL predicate.

Each filter unit looks at the criteria and either contributes one boolean
clause or returns None. ``build_filters`` ANDs together every clause that
was contributed. The search units are evaluated independently of each
other: every unit whose guard matches adds its clause.

Usage:
    criteria = SearchCriteria(status=Status.ACTIVE, offset=0, limit=20,
                              search_for=SearchTarget.SOURCE, search_value="api")
    where = build_filters(criteria, aggregate.c)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, func, or_

from app.models.log import Environment, Level, Status

logger = logging.getLogger(__name__)


class SearchTarget(str, Enum):
    DESCRIPTION = "DESCRIPTION"
    LEVEL = "LEVEL"
    SOURCE = "SOURCE"


class OrderByField(str, Enum):
    LEVEL = "LEVEL"
    EVENTS = "EVENTS"
    CREATED_AT = "CREATED_AT"

    @property
    def column(self) -> str:
        """Name of the aggregate column this option sorts on."""
        return _ORDER_COLUMNS[self]


_ORDER_COLUMNS = {
    OrderByField.LEVEL: "level",
    OrderByField.EVENTS: "events",
    OrderByField.CREATED_AT: "created_at",
}


@dataclass(frozen=True)
class SearchCriteria:
    """Parameters of one aggregate search."""

    status: Status
    offset: int
    limit: int
    environment: Environment | None = None
    order_by: OrderByField | None = None
    search_for: SearchTarget | None = None
    search_value: str | None = None

    @property
    def has_search(self) -> bool:
        # Target and value only apply together
        return self.search_for is not None and self.search_value is not None


FilterUnit = Callable[[SearchCriteria, Any], ColumnElement[bool] | None]


def _contains(column: Any, value: str) -> ColumnElement[bool]:
    return func.lower(column).contains(value.lower(), autoescape=True)


def status_filter(criteria: SearchCriteria, columns: Any) -> ColumnElement[bool]:
    return columns.status == criteria.status


def environment_filter(criteria: SearchCriteria, columns: Any) -> ColumnElement[bool] | None:
    if criteria.environment is None:
        return None
    return columns.environment == criteria.environment


def description_filter(criteria: SearchCriteria, columns: Any) -> ColumnElement[bool] | None:
    if criteria.search_for != SearchTarget.DESCRIPTION:
        return None
    return or_(
        _contains(columns.title, criteria.search_value),
        _contains(columns.description, criteria.search_value),
    )


def level_filter(criteria: SearchCriteria, columns: Any) -> ColumnElement[bool] | None:
    if criteria.search_for != SearchTarget.LEVEL:
        return None
    level = Level.from_value(criteria.search_value)
    if level is None:
        logger.debug(f"Ignoring level search for unknown level {criteria.search_value!r}")
        return None
    return columns.level == level


def source_filter(criteria: SearchCriteria, columns: Any) -> ColumnElement[bool] | None:
    if criteria.search_for != SearchTarget.SOURCE:
        return None
    return _contains(columns.source, criteria.search_value)


SEARCH_FILTERS: tuple[FilterUnit, ...] = (description_filter, level_filter, source_filter)


def build_filters(criteria: SearchCriteria, columns: Any) -> ColumnElement[bool]:
    """
    Combine every applicable filter unit into one predicate.

    Args:
        criteria: The search parameters
        columns: Column namespace to filter on (a selectable's ``.c`` or a mapped class)

    Returns:
        A single AND-ed predicate; status is always part of it
    """
    predicates: list[ColumnElement[bool]] = [status_filter(criteria, columns)]

    environment = environment_filter(criteria, columns)
    if environment is not None:
        predicates.append(environment)

    if criteria.has_search:
        for unit in SEARCH_FILTERS:
            predicate = unit(criteria, columns)
            if predicate is not None:
                predicates.append(predicate)

    return and_(*predicates)


def apply_order(query: Select, columns: Any, order_by: OrderByField | None) -> Select:
    """Sort descending on the chosen field; leave the query unordered otherwise."""
    if order_by is None:
        return query
    return query.order_by(getattr(columns, order_by.column).desc())
