"""
group_service.py - Grouping for the list view
Single responsibility: partition an already filtered+sorted ticket list into
groups (status, type or nearest epic ancestor) and flatten them into rows.

Status/type grouping is a flat bucket by field value. Epic grouping walks
deps + links upward (BFS) to the nearest ticket typed "epic".
"""
import logging
from collections import deque

from ticketboard.config import UNGROUPED_KEY, UNGROUPED_LABEL
from ticketboard.domain.models import (
    STATUSES,
    STATUS_LABELS,
    TICKET_TYPES,
    TYPE_LABELS,
    FlatRow,
    GroupHeaderRow,
    Ticket,
    TicketGroup,
    TicketRow,
)

logger = logging.getLogger(__name__)

STATUS_ORDER: dict[str, int] = {s: i for i, s in enumerate(STATUSES)}
TYPE_ORDER: dict[str, int] = {t: i for i, t in enumerate(TICKET_TYPES)}


def group_tickets(tickets: list[Ticket], group_by: str) -> list[TicketGroup]:
    """Group a pre-sorted list; order inside each group follows the input."""
    if group_by == "epic":
        return _group_by_epic(tickets)
    if group_by in ("status", "type"):
        return _group_by_field(tickets, group_by)
    logger.debug("Unknown group field %r; returning a single bucket", group_by)
    if not tickets:
        return []
    return [TicketGroup(key=UNGROUPED_KEY, label=UNGROUPED_LABEL, tickets=list(tickets))]


# ---------------------------------------------------------------------------
# Flat field grouping
# ---------------------------------------------------------------------------


def _group_by_field(tickets: list[Ticket], field: str) -> list[TicketGroup]:
    order_map = STATUS_ORDER if field == "status" else TYPE_ORDER
    label_map = STATUS_LABELS if field == "status" else TYPE_LABELS

    # dicts keep first-seen order, which is the tie-break for unknown keys
    buckets: dict[str, list[Ticket]] = {}
    for t in tickets:
        buckets.setdefault(str(getattr(t, field) or ""), []).append(t)

    keys = sorted(buckets, key=lambda k: order_map.get(k, len(order_map)))
    return [
        TicketGroup(key=k, label=label_map.get(k) or k[:1].upper() + k[1:], tickets=buckets[k])
        for k in keys
    ]


# ---------------------------------------------------------------------------
# Ancestry graph
# ---------------------------------------------------------------------------


def _parent_map(tickets: list[Ticket]) -> dict[str, list[str]]:
    """child -> direct parents present in the collection (deps before links)."""
    present = {t.id for t in tickets}
    parents: dict[str, list[str]] = {}
    for t in tickets:
        seen: set[str] = set()
        ids: list[str] = []
        for pid in list(t.deps or []) + list(t.links or []):
            if pid in present and pid != t.id and pid not in seen:
                seen.add(pid)
                ids.append(pid)
        if ids:
            parents[t.id] = ids
    return parents


def build_ancestry_map(tickets: list[Ticket]) -> dict[str, list[str]]:
    """Every ticket id -> all transitive ancestors in BFS order. Cycle-safe."""
    parents = _parent_map(tickets)
    result: dict[str, list[str]] = {}
    for t in tickets:
        visited = {t.id}
        ancestors: list[str] = []
        queue = deque(parents.get(t.id, []))
        while queue:
            pid = queue.popleft()
            if pid in visited:
                continue
            visited.add(pid)
            ancestors.append(pid)
            queue.extend(gp for gp in parents.get(pid, []) if gp not in visited)
        result[t.id] = ancestors
    return result


class EpicResolver:
    """Nearest-epic lookup with a memo that lives for one grouping call."""

    def __init__(self, tickets: list[Ticket]):
        self.by_id: dict[str, Ticket] = {t.id: t for t in tickets}
        self.parents = _parent_map(tickets)
        self._memo: dict[str, str | None] = {}

    def is_epic(self, ticket_id: str) -> bool:
        ticket = self.by_id.get(ticket_id)
        return ticket is not None and ticket.type == "epic"

    def nearest_epic(self, ticket_id: str) -> str | None:
        if ticket_id in self._memo:
            return self._memo[ticket_id]

        found: str | None = None
        visited = {ticket_id}
        queue = deque(self.parents.get(ticket_id, []))
        for pid in queue:
            visited.add(pid)
        while queue:
            pid = queue.popleft()
            if self.is_epic(pid):
                found = pid
                break
            for gp in self.parents.get(pid, []):
                if gp not in visited:
                    visited.add(gp)
                    queue.append(gp)

        if found is None and len(visited) > 1:
            logger.debug("No epic reachable from %s (%d ancestors)", ticket_id, len(visited) - 1)
        self._memo[ticket_id] = found
        return found


# ---------------------------------------------------------------------------
# Epic grouping
# ---------------------------------------------------------------------------


def _group_by_epic(tickets: list[Ticket]) -> list[TicketGroup]:
    resolver = EpicResolver(tickets)
    assignments: dict[str, str | None] = {}
    for t in tickets:
        if t.type == "epic":
            continue
        assignments[t.id] = resolver.nearest_epic(t.id)
    return build_epic_groups(tickets, assignments, resolver.by_id)


def build_epic_groups(
    tickets: list[Ticket],
    assignments: dict[str, str | None],
    known: dict[str, Ticket] | None = None,
) -> list[TicketGroup]:
    """Assemble epic groups from a child id -> epic id assignment.

    Epics in the input head groups in input order (even when empty), then epic
    ids that only appear as assignments, then the ungrouped bucket.
    """
    known = known or {}
    epics = [t for t in tickets if t.type == "epic"]
    epic_ids = {t.id for t in epics}

    buckets: dict[str, list[Ticket]] = {}
    ungrouped: list[Ticket] = []
    for t in tickets:
        if t.id in epic_ids:
            continue
        epic_id = assignments.get(t.id)
        if epic_id:
            buckets.setdefault(epic_id, []).append(t)
        else:
            ungrouped.append(t)

    groups = [
        TicketGroup(key=e.id, label=e.title, epic=e, tickets=buckets.get(e.id, []))
        for e in epics
    ]

    for epic_id, children in buckets.items():
        if epic_id in epic_ids:
            continue
        epic = known.get(epic_id)
        groups.append(
            TicketGroup(
                key=epic_id,
                label=epic.title if epic and epic.title else epic_id,
                epic=epic,
                tickets=children,
            )
        )

    if ungrouped:
        groups.append(TicketGroup(key=UNGROUPED_KEY, label=UNGROUPED_LABEL, tickets=ungrouped))
    return groups


# ---------------------------------------------------------------------------
# Flatten for the virtual list
# ---------------------------------------------------------------------------


def flatten_groups(groups: list[TicketGroup], collapsed_keys) -> list[FlatRow]:
    collapsed = set(collapsed_keys or ())
    rows: list[FlatRow] = []
    for group in groups:
        rows.append(GroupHeaderRow(group=group))
        if group.key in collapsed:
            continue
        rows.extend(TicketRow(ticket=t, group_key=group.key) for t in group.tickets)
    return rows
