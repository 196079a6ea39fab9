"""
models.py - Domain models
Single responsibility: typed containers for tickets, groups, rows and selection.
"""
from dataclasses import dataclass, field
from typing import Optional, Union

STATUSES: list[str] = ["open", "in_progress", "closed", "cancelled"]
TICKET_TYPES: list[str] = ["epic", "feature", "task", "bug", "chore"]

STATUS_LABELS: dict[str, str] = {
    "open": "Open",
    "in_progress": "In Progress",
    "closed": "Closed",
    "cancelled": "Cancelled",
}

TYPE_LABELS: dict[str, str] = {
    "epic": "Epic",
    "feature": "Feature",
    "task": "Task",
    "bug": "Bug",
    "chore": "Chore",
}

PRIORITY_LABELS: dict[int, str] = {
    0: "Urgent",
    1: "High",
    2: "Medium",
    3: "Low",
}

# Status dot click: open -> in_progress -> closed -> open
STATUS_CYCLE: dict[str, str] = {
    "open": "in_progress",
    "in_progress": "closed",
    "closed": "open",
    "cancelled": "open",
}


def _as_list(value) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def _as_priority(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 3


@dataclass
class Ticket:
    id: str
    title: str = ""
    status: str = "open"
    type: str = "task"
    priority: int = 2
    tags: list[str] = field(default_factory=list)
    deps: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    created: str = ""
    modified: str = ""
    assignee: str | None = None
    project: str = ""

    @classmethod
    def from_dict(cls, raw: dict) -> "Ticket":
        if not isinstance(raw, dict):
            raise ValueError(f"Ticket must be a mapping, got {type(raw).__name__}")
        if not raw.get("id"):
            raise ValueError("Ticket is missing an id")
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or ""),
            status=str(raw.get("status") or "open"),
            type=str(raw.get("type") or "task"),
            priority=_as_priority(raw.get("priority", 2)),
            tags=_as_list(raw.get("tags")),
            deps=_as_list(raw.get("deps")),
            links=_as_list(raw.get("links")),
            created=str(raw.get("created") or ""),
            modified=str(raw.get("modified") or ""),
            assignee=raw.get("assignee") or None,
            project=str(raw.get("project") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "type": self.type,
            "priority": self.priority,
            "tags": list(self.tags or []),
            "deps": list(self.deps or []),
            "links": list(self.links or []),
            "created": self.created,
            "modified": self.modified,
            "assignee": self.assignee,
            "project": self.project,
        }


@dataclass
class TicketGroup:
    key: str
    label: str
    tickets: list[Ticket] = field(default_factory=list)
    epic: Optional[Ticket] = None


@dataclass(frozen=True)
class GroupHeaderRow:
    group: TicketGroup
    kind: str = "group-header"


@dataclass(frozen=True)
class TicketRow:
    ticket: Ticket
    group_key: str
    kind: str = "ticket"


FlatRow = Union[GroupHeaderRow, TicketRow]


@dataclass(frozen=True)
class SelectionState:
    selection: frozenset[str] = frozenset()
    context_targets: tuple[Ticket, ...] = ()
