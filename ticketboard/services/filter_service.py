"""
filter_service.py - Filter evaluation, sorting and helpers
Single responsibility: evaluate AND-combined filter clauses plus quick search
against a ticket list and return a new, stably sorted list.
"""
import itertools
import json
import logging
import time
from datetime import datetime, timedelta
from numbers import Real
from urllib.parse import quote, unquote

from ticketboard.domain.filters import FilterClause, FilterSet
from ticketboard.domain.models import Ticket
from ticketboard.utils.time import now_utc, parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_FILTERS: FilterSet = [
    FilterClause(
        id="default-status",
        field="status",
        operator="any_of",
        value=["open", "in_progress"],
    ),
]


# ---------------------------------------------------------------------------
# Clause matching
# ---------------------------------------------------------------------------


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _safe_list(value) -> list:
    return value if isinstance(value, (list, tuple)) else []


def _match_set_field(field_value, operator: str, value) -> bool:
    # Filter values from the UI are always strings; priority is an int on the ticket
    fv = str(field_value)
    if operator == "is":
        return fv == str(value)
    if operator == "is_not":
        return fv != str(value)
    if operator in ("any_of", "none_of"):
        if not isinstance(value, (list, tuple)):
            logger.debug("Clause %s expects a list, got %r; ignoring", operator, value)
            return True
        found = fv in [str(v) for v in value]
        return found if operator == "any_of" else not found
    logger.debug("Unknown set operator %r; ignoring", operator)
    return True


def _match_tag_field(tags, operator: str, value) -> bool:
    if not isinstance(value, (list, tuple)):
        logger.debug("Tag clause expects a list, got %r; ignoring", value)
        return True
    safe_tags = _safe_list(tags)
    hit = any(v in safe_tags for v in value)
    if operator == "any_of":
        return hit
    if operator == "none_of":
        return not hit
    return True


def _match_text_field(field_value, operator: str, value) -> bool:
    if not isinstance(value, str):
        return True
    if operator == "contains":
        return value.lower() in str(field_value or "").lower()
    return True


def _match_date_field(date_str, operator: str, value, now: datetime) -> bool:
    # Unknown dates never match a date predicate
    if not date_str:
        return False
    date = parse_timestamp(date_str)
    if date is None:
        return False

    if operator in ("before", "after"):
        ref = parse_timestamp(value)
        if ref is None:
            return True
        return date < ref if operator == "before" else date > ref

    if operator == "between":
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            return True
        start, end = parse_timestamp(value[0]), parse_timestamp(value[1])
        if start is None or end is None:
            return True
        return start <= date <= end

    if operator in ("last_n_days", "newer_than", "older_than"):
        if not _is_number(value):
            return True
        cutoff = now - timedelta(days=float(value))
        return date < cutoff if operator == "older_than" else date >= cutoff

    logger.debug("Unknown date operator %r; ignoring", operator)
    return True


def match_clause(ticket: Ticket, clause: FilterClause, now: datetime | None = None) -> bool:
    field, operator, value = clause.field, clause.operator, clause.value

    if field == "status":
        return _match_set_field(ticket.status, operator, value)
    if field == "priority":
        return _match_set_field(ticket.priority, operator, value)
    if field == "type":
        return _match_set_field(ticket.type, operator, value)
    if field == "tag":
        return _match_tag_field(ticket.tags, operator, value)
    if field == "assignee":
        return _match_set_field(ticket.assignee or "", operator, value)
    if field in ("created", "modified"):
        return _match_date_field(getattr(ticket, field), operator, value, now or now_utc())
    if field == "title":
        return _match_text_field(ticket.title, operator, value)

    logger.debug("Unknown filter field %r; ignoring", field)
    return True


# ---------------------------------------------------------------------------
# Filter + sort entry point
# ---------------------------------------------------------------------------


def _priority_key(ticket: Ticket):
    return ticket.priority if _is_number(ticket.priority) else 99


_SORT_KEYS = {
    "priority": _priority_key,
    "created": lambda t: t.created or "",
    "modified": lambda t: t.modified or "",
    "title": lambda t: t.title or "",
    "status": lambda t: t.status or "",
}


def apply_filters_and_sort(
    tickets: list[Ticket],
    filters: FilterSet,
    sort_field: str,
    sort_dir: str,
    search: str | None = None,
    now: datetime | None = None,
) -> list[Ticket]:
    result = list(tickets)

    # Quick search over title + id, independent of clauses
    if search and search.strip():
        q = search.strip().lower()
        result = [t for t in result if q in (t.title or "").lower() or q in t.id.lower()]

    if filters:
        now = now or now_utc()
        for clause in filters:
            result = [t for t in result if match_clause(t, clause, now)]

    key = _SORT_KEYS.get(sort_field)
    if key is None:
        return result
    reverse = sort_dir == "desc"
    if sort_field in ("created", "modified"):
        # Unknown dates go last in either direction
        known = [t for t in result if key(t)]
        unknown = [t for t in result if not key(t)]
        return sorted(known, key=key, reverse=reverse) + unknown
    # sorted() is stable in both directions
    return sorted(result, key=key, reverse=reverse)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def unique_field_values(tickets: list[Ticket], field: str) -> list[str]:
    """Sorted unique values of a field, used as multi-select options."""
    vals: set[str] = set()
    for t in tickets:
        if field == "status":
            vals.add(t.status)
        elif field == "priority":
            vals.add(str(t.priority))
        elif field == "type":
            vals.add(t.type)
        elif field == "tag":
            vals.update(tag for tag in _safe_list(t.tags) if isinstance(tag, str))
        elif field == "assignee":
            if t.assignee:
                vals.add(t.assignee)
    return sorted(vals)


def serialize_filters(filters: FilterSet) -> str:
    if not filters:
        return ""
    return quote(json.dumps([c.to_dict() for c in filters]), safe="")


def deserialize_filters(raw: str) -> FilterSet:
    if not raw:
        return []
    try:
        data = json.loads(unquote(raw))
        if not isinstance(data, list):
            raise ValueError("filter payload is not a list")
        return [FilterClause.from_dict(item) for item in data]
    except ValueError:
        # json.JSONDecodeError is a ValueError subclass
        logger.warning("Discarding malformed filter payload: %r", raw)
        return []


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


class FilterIdGenerator:
    """Client-side ids for ephemeral filter clauses: counter + timestamp."""

    def __init__(self, clock=None):
        self._counter = itertools.count(1)
        self._clock = clock or (lambda: int(time.time() * 1000))

    def next_id(self) -> str:
        return f"f-{next(self._counter)}-{_base36(int(self._clock()))}"
