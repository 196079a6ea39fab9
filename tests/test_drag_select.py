from ticketboard.interaction.drag_select import (
    DragSelectState,
    drag_clear,
    drag_end,
    drag_move,
    drag_select_all,
    drag_start,
)


def test_drag_selects_inclusive_range_in_either_direction():
    state = drag_start(DragSelectState(), 5)
    assert state.dragging
    state = drag_move(state, 2)
    assert state.selection == {2, 3, 4, 5}
    state = drag_end(state)
    assert not state.dragging
    assert state.base_selection == {2, 3, 4, 5}


def test_move_is_ignored_when_not_dragging():
    state = DragSelectState()
    assert drag_move(state, 3) is state


def test_meta_toggles_and_shift_extends_additively():
    state = drag_start(DragSelectState(), 1, meta=True)
    state = drag_start(state, 6, meta=True)
    assert state.selection == {1, 6}
    state = drag_start(state, 8, shift=True)
    assert state.selection == {1, 6, 7, 8}
    state = drag_start(state, 6, meta=True)
    assert state.selection == {1, 7, 8}


def test_select_all_and_clear():
    state = drag_select_all(3)
    assert state.selection == {0, 1, 2}
    assert state.current_index == 2
    assert drag_clear() == DragSelectState()
