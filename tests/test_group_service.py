from conftest import make_ticket
from ticketboard.domain.models import GroupHeaderRow, TicketRow
from ticketboard.services.group_service import (
    EpicResolver,
    build_ancestry_map,
    build_epic_groups,
    flatten_groups,
    group_tickets,
)


def summary(groups):
    return [(g.key, [t.id for t in g.tickets]) for g in groups]


def test_status_groups_follow_canonical_order():
    tickets = [
        make_ticket("a", status="closed"),
        make_ticket("b", status="blocked"),
        make_ticket("c", status="open"),
        make_ticket("d", status="closed"),
        make_ticket("e", status="in_progress"),
        make_ticket("f", status="waiting"),
    ]
    groups = group_tickets(tickets, "status")
    assert summary(groups) == [
        ("open", ["c"]),
        ("in_progress", ["e"]),
        ("closed", ["a", "d"]),
        ("blocked", ["b"]),
        ("waiting", ["f"]),
    ]
    assert [g.label for g in groups] == ["Open", "In Progress", "Closed", "Blocked", "Waiting"]


def test_type_groups_keep_input_order_inside_groups():
    tickets = [
        make_ticket("a", type="bug"),
        make_ticket("b", type="spike"),
        make_ticket("c", type="epic"),
        make_ticket("d", type="bug"),
    ]
    assert summary(group_tickets(tickets, "type")) == [
        ("epic", ["c"]),
        ("bug", ["a", "d"]),
        ("spike", ["b"]),
    ]


def test_epic_grouping_walks_through_intermediate_tickets():
    tickets = [
        make_ticket("e-1", type="epic", title="Checkout"),
        make_ticket("t-2", deps=["e-1"]),
        make_ticket("t-3", links=["t-2"]),
    ]
    groups = group_tickets(tickets, "epic")
    assert summary(groups) == [("e-1", ["t-2", "t-3"])]
    assert groups[0].label == "Checkout"
    assert groups[0].epic is tickets[0]


def test_epic_cycle_terminates_ungrouped():
    tickets = [make_ticket("A", deps=["B"]), make_ticket("B", deps=["A"])]
    groups = group_tickets(tickets, "epic")
    assert summary(groups) == [("__ungrouped__", ["A", "B"])]
    assert groups[0].label == "Ungrouped"
    assert groups[0].epic is None


def test_epic_without_children_is_still_emitted():
    tickets = [
        make_ticket("e-1", type="epic"),
        make_ticket("e-2", type="epic"),
        make_ticket("t-1", deps=["e-2"]),
        make_ticket("t-2"),
    ]
    assert summary(group_tickets(tickets, "epic")) == [
        ("e-1", []),
        ("e-2", ["t-1"]),
        ("__ungrouped__", ["t-2"]),
    ]


def test_nearest_epic_wins_and_deps_break_ties():
    tickets = [
        make_ticket("far", type="epic"),
        make_ticket("near", type="epic"),
        make_ticket("mid", deps=["far"]),
        # via deps: mid -> far is 2 hops, via links: near is 1 hop
        make_ticket("t-1", deps=["mid"], links=["near"]),
        # same depth: deps come before links
        make_ticket("t-2", deps=["far"], links=["near"]),
    ]
    groups = {g.key: [t.id for t in g.tickets] for g in group_tickets(tickets, "epic")}
    assert groups["near"] == ["t-1"]
    assert groups["far"] == ["mid", "t-2"]


def test_missing_references_are_ignored():
    tickets = [make_ticket("t-1", deps=["gone"], links=["also-gone"]), make_ticket("t-2", deps=["t-2"])]
    assert summary(group_tickets(tickets, "epic")) == [("__ungrouped__", ["t-1", "t-2"])]


def test_epic_grouping_is_deterministic():
    tickets = [
        make_ticket("e-1", type="epic"),
        make_ticket("a", deps=["b"], links=["e-1"]),
        make_ticket("b", deps=["a"]),
        make_ticket("c", links=["b"]),
    ]
    assert summary(group_tickets(tickets, "epic")) == summary(group_tickets(tickets, "epic"))
    assert summary(group_tickets(tickets, "epic")) == [("e-1", ["a", "b", "c"])]


def test_resolver_memo_is_per_instance():
    tickets = [make_ticket("e-1", type="epic"), make_ticket("t-1", deps=["e-1"])]
    resolver = EpicResolver(tickets)
    assert resolver.nearest_epic("t-1") == "e-1"
    assert resolver.nearest_epic("t-1") == "e-1"
    # a changed graph gets a fresh resolver and a fresh answer
    assert EpicResolver([make_ticket("t-1")]).nearest_epic("t-1") is None


def test_external_epic_ancestor_heads_its_own_group():
    tickets = [make_ticket("e-1", type="epic"), make_ticket("t-1"), make_ticket("t-2")]
    groups = build_epic_groups(tickets, {"t-1": "e-9", "t-2": None})
    assert summary(groups) == [("e-1", []), ("e-9", ["t-1"]), ("__ungrouped__", ["t-2"])]
    assert groups[1].epic is None
    assert groups[1].label == "e-9"


def test_unknown_group_field_is_a_single_bucket():
    tickets = [make_ticket("b"), make_ticket("a")]
    assert summary(group_tickets(tickets, "assignee")) == [("__ungrouped__", ["b", "a"])]
    assert group_tickets([], "assignee") == []


def test_ancestry_map_is_transitive_and_cycle_safe():
    tickets = [
        make_ticket("a", deps=["b"]),
        make_ticket("b", deps=["c"], links=["a"]),
        make_ticket("c"),
    ]
    ancestry = build_ancestry_map(tickets)
    assert ancestry == {"a": ["b", "c"], "b": ["c", "a"], "c": []}


def test_flatten_omits_children_of_collapsed_groups():
    tickets = [
        make_ticket("t-1", status="open"),
        make_ticket("t-2", status="closed"),
        make_ticket("t-3", status="open"),
    ]
    groups = group_tickets(tickets, "status")
    rows = flatten_groups(groups, {"closed"})
    assert [type(r) for r in rows] == [GroupHeaderRow, TicketRow, TicketRow, GroupHeaderRow]
    assert [r.ticket.id for r in rows if r.kind == "ticket"] == ["t-1", "t-3"]
    assert rows[1].group_key == "open"
    assert len(flatten_groups(groups, set())) == 5
