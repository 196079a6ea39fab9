from types import SimpleNamespace

import flet as ft
import pytest

from conftest import make_ticket
from ticketboard.domain.models import GroupHeaderRow, TicketRow
from ticketboard.interaction.list_interaction import ListInteraction
from ticketboard.services.filter_service import FilterIdGenerator
from ticketboard.ui import views
from ticketboard.ui.components.ticket_row import GroupHeader, TicketListRow
from ticketboard.ui_state import AppState


class Screen:
    """Stub page plus the state and callbacks build_list_view is wired to."""

    def __init__(self, tickets):
        self.tickets = tickets
        self.page = SimpleNamespace(run_task=lambda *_args: None, overlay=[])
        self.state = AppState(id_generator=FilterIdGenerator(clock=lambda: 0))
        self.visible = []
        self.navigated = []
        self.refreshes = 0
        self.bulk = []
        self.interaction = ListInteraction(
            get_tickets=lambda: self.visible,
            navigate=self.navigated.append,
            cycle_status=lambda *_args: None,
        )

    def on_refresh(self):
        self.refreshes += 1

    def build(self):
        rows = self.state.visible_rows(self.tickets)
        self.visible = [r.ticket for r in rows if r.kind == "ticket"]
        return views.build_list_view(
            page=self.page,
            state=self.state,
            rows=rows,
            all_tickets=self.tickets,
            interaction=self.interaction,
            on_refresh=self.on_refresh,
            on_bulk_status=self.bulk.append,
        )


@pytest.fixture
def screen():
    return Screen(
        [
            make_ticket("e-1", type="epic", priority=0),
            make_ticket("t-1", tags=["ui"], deps=["e-1"]),
            make_ticket("t-2", assignee="ana"),
        ]
    )


def list_rows(view):
    return view.controls[-1].controls


def test_ticket_indices_skip_group_headers():
    group = SimpleNamespace(key="task")
    a, b = make_ticket("a"), make_ticket("b")
    rows = [
        GroupHeaderRow(group=group),
        TicketRow(ticket=a, group_key="task"),
        GroupHeaderRow(group=group),
        TicketRow(ticket=b, group_key="task"),
    ]
    assert views.ticket_indices(rows) == {1: 0, 3: 1}


def test_build_ungrouped_view(screen):
    view = screen.build()

    assert isinstance(view, ft.View)
    rows = list_rows(view)
    assert all(isinstance(r, TicketListRow) for r in rows)
    assert [r.ticket.id for r in rows] == ["e-1", "t-1", "t-2"]
    assert [r.index for r in rows] == [0, 1, 2]


def test_build_grouped_view_with_collapsed_group(screen):
    screen.state.set_group_by("type")
    screen.state.toggle_group("epic")
    view = screen.build()

    rows = list_rows(view)
    assert [type(r) for r in rows] == [GroupHeader, GroupHeader, TicketListRow, TicketListRow]
    assert [r.ticket.id for r in rows[2:]] == ["t-1", "t-2"]
    assert [r.index for r in rows[2:]] == [0, 1]
    assert [t.id for t in screen.visible] == ["t-1", "t-2"]


def test_row_press_reaches_interaction_with_visible_index(screen):
    screen.state.set_group_by("type")
    view = screen.build()

    rows = [r for r in list_rows(view) if isinstance(r, TicketListRow)]
    t2 = next(r for r in rows if r.ticket.id == "t-2")
    t2.on_press_callback(t2.index, None)

    assert screen.navigated == ["t-2"]


def test_filter_chips_and_bulk_bar(screen):
    view = screen.build()
    filter_bar, bulk_bar = view.controls[1], view.controls[2]

    # default status clause renders as one chip ahead of the menu and clear button
    assert len(filter_bar.controls) == 3
    assert bulk_bar.visible is False

    screen.interaction.select_all()
    view = screen.build()
    assert view.controls[2].visible is True


def test_empty_result_shows_placeholder(screen):
    screen.state.search = "no such ticket"
    view = screen.build()

    rows = list_rows(view)
    assert len(rows) == 1
    assert not isinstance(rows[0], TicketListRow)


def test_group_dropdown_selection_updates_state(screen):
    view = screen.build()
    dropdown = view.controls[0].controls[1]

    dropdown.on_select(SimpleNamespace(control=SimpleNamespace(value="status")))

    assert screen.state.group_by == "status"
    assert screen.refreshes == 1


def test_error_dialog_replaces_previous_one():
    page = SimpleNamespace(overlay=[])

    first = views.show_error_dialog(page, ValueError("boom"))
    second = views.show_error_dialog(page, ValueError("again"), previous=first)

    assert len(page.overlay) == 1 and page.overlay[0] is second
    assert first.open is False and second.open is True

    assert views.dismiss_dialog(page, second) is None
    assert page.overlay == []
    assert views.dismiss_dialog(page, None) is None
