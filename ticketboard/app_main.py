"""
app_main.py - Ticket Board メインアプリケーション
Ticket Board v0.1
"""

import logging
from dataclasses import replace

import flet as ft

from ticketboard.config import APP_TITLE, COLOR_BG, COLOR_PRIMARY, TICKETS_PATH
from ticketboard.domain.models import SelectionState, Ticket
from ticketboard.interaction.list_interaction import ListInteraction
from ticketboard.services import ticket_source
from ticketboard.ui import views
from ticketboard.ui_state import AppState
from ticketboard.utils.time import now_iso

logger = logging.getLogger(__name__)


def main(page: ft.Page):
    page.title = APP_TITLE
    page.theme_mode = ft.ThemeMode.DARK
    page.bgcolor = COLOR_BG
    page.padding = 0
    page.theme = ft.Theme(color_scheme_seed=COLOR_PRIMARY)

    state = AppState()
    tickets: list[Ticket] = ticket_source.load_tickets(TICKETS_PATH)
    visible: list[Ticket] = []

    def get_visible() -> list[Ticket]:
        return visible

    def update_ticket(ticket_id: str, **changes):
        # The engine never mutates tickets; replace the snapshot entry instead
        nonlocal tickets
        tickets = [
            replace(t, modified=now_iso(), **changes) if t.id == ticket_id else t
            for t in tickets
        ]

    def navigate(ticket_id: str):
        page.show_dialog(ft.SnackBar(ft.Text(f"Open {ticket_id}")))

    def cycle_status(ticket_id: str, new_status: str):
        update_ticket(ticket_id, status=new_status)
        refresh_list()

    def on_selection_change(_snapshot: SelectionState):
        refresh_list()

    interaction = ListInteraction(
        get_tickets=get_visible,
        navigate=navigate,
        cycle_status=cycle_status,
        on_change=on_selection_change,
    )

    def bulk_status(new_status: str):
        for ticket_id in interaction.selection:
            update_ticket(ticket_id, status=new_status)
        interaction.clear()
        refresh_list()

    error_dialog: ft.AlertDialog | None = None

    def refresh_list():
        nonlocal visible, error_dialog
        try:
            rows = state.visible_rows(tickets)
            visible = [r.ticket for r in rows if r.kind == "ticket"]
            error_dialog = views.dismiss_dialog(page, error_dialog)
            page.views.clear()
            page.views.append(
                views.build_list_view(
                    page=page,
                    state=state,
                    rows=rows,
                    all_tickets=tickets,
                    interaction=interaction,
                    on_refresh=refresh_list,
                    on_bulk_status=bulk_status,
                )
            )
            page.update()
        except Exception as exc:
            logger.exception("Error in refresh_list")
            error_dialog = views.show_error_dialog(page, exc, previous=error_dialog)
            page.update()

    cursor = 0

    def on_keyboard(e: ft.KeyboardEvent):
        nonlocal cursor
        if e.key == "Escape":
            interaction.escape()
        elif e.key.upper() == "A" and (e.ctrl or e.meta):
            interaction.select_all()
        elif e.key in ("Arrow Down", "Arrow Up") and visible:
            step = 1 if e.key == "Arrow Down" else -1
            cursor = max(0, min(len(visible) - 1, cursor + step))
            if e.shift:
                interaction.extend_selection_to(cursor)
        elif e.key.upper() == "X" and visible:
            interaction.toggle_selection(min(cursor, len(visible) - 1))

    page.on_keyboard_event = on_keyboard
    refresh_list()
