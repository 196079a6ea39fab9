from conftest import make_ticket
from ticketboard.services.filter_service import FilterIdGenerator
from ticketboard.ui_state import AppState


def new_state():
    return AppState(id_generator=FilterIdGenerator(clock=lambda: 0))


def test_add_update_remove_filters():
    state = new_state()
    assert [c.id for c in state.filters] == ["default-status"]

    fid = state.add_filter("tag")
    assert fid == "f-1-0"
    added = state.filters[-1]
    assert (added.operator, added.value) == ("any_of", [])

    state.update_filter(fid, value=["ui"])
    assert state.filters[-1].value == ["ui"]
    assert state.filters[-1].operator == "any_of"

    state.remove_filter("default-status")
    assert [c.id for c in state.filters] == [fid]

    state.search = "x"
    state.clear_filters()
    assert state.filters == [] and state.search == ""


def test_date_filter_defaults():
    state = new_state()
    state.add_filter("created")
    assert (state.filters[-1].operator, state.filters[-1].value) == ("newer_than", 7)
    state.add_filter("modified", "between")
    assert state.filters[-1].value == ["", ""]


def test_set_sort_toggles_direction():
    state = new_state()
    assert (state.sort_field, state.sort_dir) == ("priority", "asc")
    state.set_sort("priority")
    assert state.sort_dir == "desc"
    state.set_sort("priority")
    assert state.sort_dir == "asc"
    state.set_sort("priority")
    state.set_sort("title")
    assert (state.sort_field, state.sort_dir) == ("title", "asc")


def test_visible_rows_groups_and_collapses():
    tickets = [
        make_ticket("e-1", type="epic", priority=1),
        make_ticket("t-1", deps=["e-1"], priority=0),
        make_ticket("t-2", priority=2),
        make_ticket("t-3", status="closed"),
    ]
    state = new_state()
    assert [r.ticket.id for r in state.visible_rows(tickets)] == ["t-1", "e-1", "t-2"]

    state.set_group_by("epic")
    state.toggle_group("__ungrouped__")
    rows = state.visible_rows(tickets)
    assert [(r.kind, r.group.key if r.kind == "group-header" else r.ticket.id) for r in rows] == [
        ("group-header", "e-1"),
        ("ticket", "t-1"),
        ("group-header", "__ungrouped__"),
    ]

    state.switch_project("other")
    assert state.collapsed_groups == set()
    assert state.active_project == "other"
