"""
list_interaction.py - List interaction state machine
Single responsibility: turn pointer/keyboard primitives into a selection set
and context-menu targets for one ticket list view. No rendering dependency.

The view creates one ListInteraction per list, forwards events to it and
re-renders from the SelectionState passed to on_change. Range math is done on
indices of the live visible order and committed as ticket-id sets, so a
re-sort between events never corrupts the selection.

    idle --mousedown--> pending --move >= threshold--> dragging --mouseup--> idle
"""
import logging
from dataclasses import dataclass, field
from typing import Callable

from ticketboard.config import DRAG_THRESHOLD
from ticketboard.domain.models import STATUS_CYCLE, SelectionState, Ticket
from ticketboard.interaction.drag_select import range_set

logger = logging.getLogger(__name__)

# mousedown / click results for the view
STOP = "stop"  # stop propagation
PREVENT = "prevent"  # prevent default (native text selection)

# Row affordances that get special handling
ACTION_CHECKBOX = "checkbox"
ACTION_STATUS = "status"
ACTION_MENU = "menu"


@dataclass
class PendingDrag:
    index: int
    x: float
    y: float


@dataclass
class InteractionState:
    selection: set[str] = field(default_factory=set)
    anchor_id: str | None = None
    context_targets: list[Ticket] = field(default_factory=list)
    dragging: bool = False
    # a drag happened during the current press; the trailing click is ignored
    dragged: bool = False
    anchor_index: int = -1
    current_index: int = -1
    base_selection: set[str] = field(default_factory=set)
    pending: PendingDrag | None = None

    @property
    def mode(self) -> str:
        if self.dragging:
            return "dragging"
        if self.pending is not None:
            return "pending"
        return "idle"

    def snapshot(self) -> SelectionState:
        return SelectionState(
            selection=frozenset(self.selection),
            context_targets=tuple(self.context_targets),
        )


def next_status(status: str) -> str:
    return STATUS_CYCLE.get(status, "open")


class ListInteraction:
    def __init__(
        self,
        get_tickets: Callable[[], list[Ticket]],
        navigate: Callable[[str], None],
        cycle_status: Callable[[str, str], None],
        on_change: Callable[[SelectionState], None] | None = None,
        threshold: int = DRAG_THRESHOLD,
    ):
        self._get_tickets = get_tickets
        self._navigate = navigate
        self._cycle_status = cycle_status
        self._on_change = on_change
        self._threshold = threshold
        self._state = InteractionState()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        """Current snapshot, without notifying."""
        return self._state.snapshot()

    @property
    def internal(self) -> InteractionState:
        return self._state

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._state.selection)

    def _ticket_at(self, index: int | None) -> Ticket | None:
        if index is None or index < 0:
            return None
        tickets = self._get_tickets()
        if index >= len(tickets):
            logger.debug("Index %s is outside the visible list (%d)", index, len(tickets))
            return None
        return tickets[index]

    def _ids_in_range(self, a: int, b: int) -> set[str]:
        tickets = self._get_tickets()
        return {tickets[i].id for i in range_set(a, b) if 0 <= i < len(tickets)}

    def _commit(self, selection: set[str], context_targets: list[Ticket] | None = None) -> None:
        before = self._state.snapshot()
        self._state.selection = set(selection)
        if context_targets is not None:
            self._state.context_targets = list(context_targets)
        after = self._state.snapshot()
        if after != before and self._on_change:
            self._on_change(after)

    def _commit_range(self) -> None:
        s = self._state
        self._commit(self._ids_in_range(s.anchor_index, s.current_index) | s.base_selection)

    def _toggle(self, index: int, ticket: Ticket) -> None:
        toggled = set(self._state.selection) ^ {ticket.id}
        self._state.anchor_index = index
        self._state.anchor_id = ticket.id
        self._state.base_selection = set(toggled)
        self._commit(toggled)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def mousedown(
        self,
        index: int,
        x: float,
        y: float,
        shift: bool = False,
        meta: bool = False,
        action: str | None = None,
    ) -> str | None:
        ticket = self._ticket_at(index)
        if ticket is None:
            return None

        if action == ACTION_CHECKBOX:
            self._toggle(index, ticket)
            return STOP

        # status dot and row menu are handled on click
        if action in (ACTION_STATUS, ACTION_MENU):
            return None

        if meta:
            self._toggle(index, ticket)
            return PREVENT

        if shift and self._state.anchor_index >= 0:
            self._state.current_index = index
            self._commit_range()
            return PREVENT

        # Plain press: defer until the pointer moves past the threshold so a
        # click can still navigate without a selection flicker
        self._state.dragged = False
        self._state.pending = PendingDrag(index=index, x=x, y=y)
        return PREVENT

    def global_mousemove(self, x: float, y: float, index_at_point: int | None = None) -> bool:
        """Returns whether a drag is active after handling the move."""
        s = self._state
        if s.pending is not None and not s.dragging:
            if abs(x - s.pending.x) + abs(y - s.pending.y) >= self._threshold:
                index = s.pending.index
                s.pending = None
                s.dragging = True
                s.dragged = True
                s.anchor_index = index
                s.current_index = index
                s.base_selection = set()
                ticket = self._ticket_at(index)
                if ticket is not None:
                    s.anchor_id = ticket.id
                self._commit({ticket.id} if ticket else set())
            return s.dragging

        if not s.dragging or index_at_point is None:
            return s.dragging
        if index_at_point == s.current_index:
            return True
        if self._ticket_at(index_at_point) is None:
            return True

        s.current_index = index_at_point
        self._commit_range()
        return True

    def global_mouseup(self) -> None:
        s = self._state
        s.pending = None
        if s.dragging:
            s.dragging = False
            s.base_selection = set(s.selection)

    def click(
        self,
        index: int,
        shift: bool = False,
        meta: bool = False,
        action: str | None = None,
    ) -> str | None:
        ticket = self._ticket_at(index)
        if ticket is None:
            return None

        if action == ACTION_STATUS:
            self._cycle_status(ticket.id, next_status(ticket.status))
            return STOP

        # checkbox and modifier clicks were handled on mousedown
        if action in (ACTION_CHECKBOX, ACTION_MENU) or shift or meta:
            return None

        if self._state.dragging or self._state.dragged:
            self._state.dragged = False
            return None

        if not self._state.selection:
            self._state.pending = None
            self._navigate(ticket.id)
            return None

        # Click with an active bulk selection deselects instead of navigating
        self.clear()
        return None

    def contextmenu(self, index: int) -> None:
        ticket = self._ticket_at(index)
        if ticket is None:
            return

        s = self._state
        if ticket.id in s.selection:
            targets = [t for t in self._get_tickets() if t.id in s.selection]
            self._commit(s.selection, targets)
            return

        s.anchor_index = index
        s.anchor_id = ticket.id
        s.base_selection = {ticket.id}
        self._commit({ticket.id}, [ticket])

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def escape(self) -> None:
        if self._state.selection:
            self.clear()

    def select_all(self) -> None:
        ids = {t.id for t in self._get_tickets()}
        self._state.base_selection = set(ids)
        self._commit(ids)

    def toggle_selection(self, index: int) -> None:
        ticket = self._ticket_at(index)
        if ticket is not None:
            self._toggle(index, ticket)

    def extend_selection_to(self, index: int) -> None:
        """Range-select from the anchor ticket to index, keeping the selection."""
        ticket = self._ticket_at(index)
        if ticket is None:
            return
        s = self._state
        if s.anchor_id is None:
            self._toggle(index, ticket)
            return
        ids = [t.id for t in self._get_tickets()]
        if s.anchor_id not in ids:
            return
        selection = self._ids_in_range(ids.index(s.anchor_id), index) | s.selection
        s.base_selection = set(selection)
        self._commit(selection)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self._state.dragging = False
        self._state.dragged = False
        self._state.pending = None
        self._state.anchor_index = -1
        self._state.current_index = -1
        self._state.anchor_id = None
        self._state.base_selection = set()
        self._commit(set(), [])

    def can_highlight(self) -> bool:
        return not self._state.dragging and self._state.pending is None

    def is_dragging(self) -> bool:
        return self._state.dragging
