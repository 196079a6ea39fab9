"""
helpers.py - UI helper functions
Single responsibility: small formatting helpers used across UI.
"""
from ticketboard.config import COLOR_TEXT_MUTED, STATUS_COLORS
from ticketboard.domain.filters import DATE_PRESETS, FIELD_LABELS, OPERATOR_LABELS, FilterClause
from ticketboard.domain.models import PRIORITY_LABELS, STATUS_LABELS
from ticketboard.utils.time import parse_timestamp


def format_datetime(iso_str: str) -> str:
    """ISO 8601 string to "YYYY-MM-DD HH:MM"; fallback to raw on error."""
    dt = parse_timestamp(iso_str)
    if dt is None:
        return iso_str or ""
    return dt.strftime("%Y-%m-%d %H:%M")


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, COLOR_TEXT_MUTED)


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status) or status.replace("_", " ").capitalize()


def priority_label(priority: int) -> str:
    return PRIORITY_LABELS.get(priority, f"P{priority}")


def describe_days(days) -> str:
    for label, preset in DATE_PRESETS:
        if abs(preset - days) < 1e-9:
            return label
    return f"{days:g} days"


def describe_clause(clause: FilterClause) -> str:
    """Chip text such as "Status is any of open, closed"."""
    field = FIELD_LABELS.get(clause.field, clause.field)
    op = OPERATOR_LABELS.get(clause.operator, clause.operator)
    value = clause.value
    if clause.operator in ("last_n_days", "newer_than", "older_than") and isinstance(value, (int, float)):
        text = describe_days(value)
    elif clause.operator == "between" and isinstance(value, (list, tuple)):
        text = " and ".join(str(v) for v in value)
    elif isinstance(value, (list, tuple)):
        text = ", ".join(str(v) for v in value) or "…"
    else:
        text = str(value) if value not in (None, "") else "…"
    return f"{field} {op} {text}"
