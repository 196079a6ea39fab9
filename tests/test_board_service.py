import pytest

from conftest import make_ticket
from ticketboard.domain.filters import FilterClause
from ticketboard.services.board_service import SavedList, SavedView, board_columns


def status_column(name, statuses, sort_field="priority", sort_dir="asc"):
    return SavedList(
        name=name,
        filters=[FilterClause(id=name, field="status", operator="any_of", value=statuses)],
        sort_field=sort_field,
        sort_dir=sort_dir,
    )


def tickets():
    return [
        make_ticket("a", status="open", priority=2, title="b"),
        make_ticket("b", status="in_progress", priority=0, title="c"),
        make_ticket("c", status="open", priority=1, title="a"),
        make_ticket("d", status="closed", priority=3, title="d"),
    ]


def test_leftmost_column_claims_tickets():
    columns = [
        status_column("Active", ["open", "in_progress"]),
        status_column("Open", ["open"]),
        SavedList(name="Everything else"),
    ]
    result = board_columns(tickets(), columns)
    assert [[t.id for t in col] for col in result] == [["b", "c", "a"], [], ["d"]]


def test_board_sort_override_applies_to_every_column():
    columns = [status_column("Open", ["open"], sort_field="priority")]
    result = board_columns(tickets(), columns, sort_override=("title", "desc"))
    assert [t.id for t in result[0]] == ["a", "c"]


def test_saved_view_from_dict():
    raw = {
        "id": "v1",
        "name": "Board",
        "mode": "board",
        "columns": [
            {"name": "Open", "filters": [{"id": "x", "field": "status", "operator": "any_of", "value": ["open"]}],
             "sortField": "created", "sortDir": "desc"},
        ],
        "boardSort": {"field": "title", "dir": "asc"},
    }
    view = SavedView.from_dict(raw)
    assert view.mode == "board"
    assert view.columns[0].sort_field == "created"
    assert view.columns[0].filters[0].value == ["open"]
    assert view.board_sort == ("title", "asc")
    assert view.list_view is None
    assert SavedView.from_dict(view.to_dict()) == view


def test_saved_view_partial_board_sort_uses_defaults():
    view = SavedView.from_dict({"id": "v2", "name": "B", "boardSort": {"dir": "desc"}})
    assert view.board_sort == ("priority", "desc")


def test_saved_view_rejects_malformed_parts():
    with pytest.raises(ValueError):
        SavedView.from_dict({"id": "v3", "name": "B", "boardSort": "title"})
    with pytest.raises(ValueError):
        SavedView.from_dict({"id": "v4", "name": "B", "columns": ["Open"]})
    with pytest.raises(ValueError):
        SavedList.from_dict(None)
