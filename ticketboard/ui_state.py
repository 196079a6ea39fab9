"""
ui_state.py - UI state container
Single responsibility: hold the filter/sort/group state of one list view and
run the filter -> group -> flatten pipeline over a ticket snapshot.
"""
from dataclasses import replace

from ticketboard.config import DEFAULT_SORT_DIR, DEFAULT_SORT_FIELD
from ticketboard.domain.filters import FIELD_OPERATORS, FilterClause, default_value
from ticketboard.domain.models import FlatRow, Ticket, TicketRow
from ticketboard.services import filter_service, group_service
from ticketboard.services.filter_service import FilterIdGenerator


class AppState:
    def __init__(self, id_generator: FilterIdGenerator | None = None):
        self.ids = id_generator or FilterIdGenerator()
        self.active_project: str | None = None
        self.filters: list[FilterClause] = list(filter_service.DEFAULT_FILTERS)
        self.search: str = ""
        self.sort_field: str = DEFAULT_SORT_FIELD
        self.sort_dir: str = DEFAULT_SORT_DIR  # "asc" | "desc"
        self.group_by: str | None = None  # "status" | "type" | "epic"
        self.collapsed_groups: set[str] = set()

    # --- filters ---

    def add_filter(self, field: str, operator: str | None = None, value=None) -> str:
        op = operator or FIELD_OPERATORS[field][0]
        clause = FilterClause(
            id=self.ids.next_id(),
            field=field,
            operator=op,
            value=value if value is not None else default_value(field, op),
        )
        self.filters = self.filters + [clause]
        return clause.id

    def update_filter(self, filter_id: str, operator: str | None = None, value=None) -> None:
        updated = []
        for clause in self.filters:
            if clause.id == filter_id:
                clause = replace(
                    clause,
                    operator=operator if operator is not None else clause.operator,
                    value=value if value is not None else clause.value,
                )
            updated.append(clause)
        self.filters = updated

    def remove_filter(self, filter_id: str) -> None:
        self.filters = [c for c in self.filters if c.id != filter_id]

    def clear_filters(self) -> None:
        self.filters = []
        self.search = ""

    # --- sort / group ---

    def set_sort(self, field: str) -> None:
        # same field toggles direction, a new field starts ascending
        if self.sort_field == field and self.sort_dir == "asc":
            self.sort_dir = "desc"
        else:
            self.sort_dir = "asc"
        self.sort_field = field

    def set_group_by(self, field: str | None) -> None:
        self.group_by = field

    def toggle_group(self, key: str) -> None:
        if key in self.collapsed_groups:
            self.collapsed_groups.discard(key)
        else:
            self.collapsed_groups.add(key)

    def switch_project(self, project_id: str | None) -> None:
        """New ticket collection: per-collection view state is dropped."""
        self.active_project = project_id
        self.collapsed_groups = set()

    # --- pipeline ---

    def visible_tickets(self, tickets: list[Ticket]) -> list[Ticket]:
        return filter_service.apply_filters_and_sort(
            tickets, self.filters, self.sort_field, self.sort_dir, self.search
        )

    def visible_rows(self, tickets: list[Ticket]) -> list[FlatRow]:
        visible = self.visible_tickets(tickets)
        if not self.group_by:
            return [TicketRow(ticket=t, group_key="") for t in visible]
        groups = group_service.group_tickets(visible, self.group_by)
        return group_service.flatten_groups(groups, self.collapsed_groups)
