"""
drag_select.py - Index-based drag selection
Single responsibility: pure functions over an immutable drag state.

Flow: drag_start(index) -> drag_move(index) ... -> drag_end(). Shift extends
from the anchor, meta toggles one index; both keep the prior selection.
"""
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class DragSelectState:
    dragging: bool = False
    anchor_index: int = -1
    current_index: int = -1
    # selection before the current gesture, for additive drags
    base_selection: frozenset[int] = frozenset()
    selection: frozenset[int] = frozenset()


def range_set(a: int, b: int) -> set[int]:
    return set(range(min(a, b), max(a, b) + 1))


def drag_start(
    state: DragSelectState, index: int, shift: bool = False, meta: bool = False
) -> DragSelectState:
    if meta:
        toggled = frozenset(state.selection ^ {index})
        return replace(
            state,
            dragging=False,
            anchor_index=index,
            current_index=index,
            selection=toggled,
            base_selection=toggled,
        )

    if shift and state.anchor_index >= 0:
        selection = range_set(state.anchor_index, index) | state.base_selection
        return replace(state, dragging=False, current_index=index, selection=frozenset(selection))

    return DragSelectState(
        dragging=True,
        anchor_index=index,
        current_index=index,
        selection=frozenset({index}),
    )


def drag_move(state: DragSelectState, index: int) -> DragSelectState:
    if not state.dragging or index == state.current_index:
        return state
    selection = range_set(state.anchor_index, index) | state.base_selection
    return replace(state, current_index=index, selection=frozenset(selection))


def drag_end(state: DragSelectState) -> DragSelectState:
    return replace(state, dragging=False, base_selection=state.selection)


def drag_clear() -> DragSelectState:
    return DragSelectState()


def drag_select_all(count: int) -> DragSelectState:
    selection = frozenset(range(count))
    return DragSelectState(
        anchor_index=0,
        current_index=count - 1,
        base_selection=selection,
        selection=selection,
    )
