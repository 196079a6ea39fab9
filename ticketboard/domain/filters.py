"""
filters.py - Filter DTOs
Single responsibility: carry filter clauses and the field/operator tables.
"""
from dataclasses import dataclass
from typing import Any

FILTER_FIELDS: list[str] = [
    "status",
    "priority",
    "type",
    "tag",
    "assignee",
    "created",
    "modified",
    "title",
]

DATE_OPERATORS: list[str] = [
    "newer_than",
    "older_than",
    "last_n_days",
    "before",
    "after",
    "between",
]

FIELD_OPERATORS: dict[str, list[str]] = {
    "status": ["any_of", "none_of"],
    "priority": ["any_of", "none_of"],
    "type": ["any_of", "none_of"],
    "tag": ["any_of", "none_of"],
    "assignee": ["is", "is_not", "any_of", "none_of"],
    "created": DATE_OPERATORS,
    "modified": DATE_OPERATORS,
    "title": ["contains"],
}

FIELD_LABELS: dict[str, str] = {
    "status": "Status",
    "priority": "Priority",
    "type": "Type",
    "tag": "Tag",
    "assignee": "Assignee",
    "created": "Created",
    "modified": "Modified",
    "title": "Title",
}

OPERATOR_LABELS: dict[str, str] = {
    "is": "is",
    "is_not": "is not",
    "any_of": "is any of",
    "none_of": "is none of",
    "contains": "contains",
    "before": "before",
    "after": "after",
    "between": "between",
    "last_n_days": "in last",
    "older_than": "older than",
    "newer_than": "newer than",
}

# (label, days); fractional days allowed for sub-day windows
DATE_PRESETS: list[tuple[str, float]] = [
    ("4 hours", 4 / 24),
    ("8 hours", 8 / 24),
    ("12 hours", 0.5),
    ("24 hours", 1),
    ("7 days", 7),
    ("30 days", 30),
    ("90 days", 90),
    ("1 year", 365),
]

SORT_FIELDS: list[str] = ["priority", "created", "modified", "title", "status"]
GROUP_FIELDS: list[str] = ["status", "type", "epic"]


@dataclass
class FilterClause:
    id: str
    field: str
    operator: str
    value: Any = None

    @classmethod
    def from_dict(cls, raw: dict) -> "FilterClause":
        if not isinstance(raw, dict):
            raise ValueError(f"Filter clause must be a mapping, got {type(raw).__name__}")
        return cls(
            id=str(raw.get("id") or ""),
            field=str(raw.get("field") or ""),
            operator=str(raw.get("operator") or ""),
            value=raw.get("value"),
        )

    def to_dict(self) -> dict:
        value = self.value
        if isinstance(value, tuple):
            value = list(value)
        return {"id": self.id, "field": self.field, "operator": self.operator, "value": value}


FilterSet = list[FilterClause]


def default_value(field: str, operator: str):
    """Initial value for a freshly added clause."""
    if operator in ("any_of", "none_of"):
        return []
    if operator in ("last_n_days", "newer_than", "older_than"):
        return 7
    if operator == "between":
        return ["", ""]
    return ""
