"""
views.py - UI view builders (ticket list)
Single responsibility: build flet Views from engine output and forward
pointer events to the list interaction machine.
"""

import asyncio

import flet as ft

from ticketboard.config import (
    APP_TITLE,
    COLOR_BG,
    COLOR_BORDER,
    COLOR_CARD,
    COLOR_PRIMARY,
    COLOR_TEXT_MAIN,
    COLOR_TEXT_MUTED,
    ROW_HEIGHT,
)
from ticketboard.domain.filters import DATE_PRESETS, FIELD_LABELS, GROUP_FIELDS, SORT_FIELDS
from ticketboard.domain.models import FlatRow, Ticket
from ticketboard.interaction.list_interaction import ListInteraction
from ticketboard.services.filter_service import unique_field_values
from ticketboard.ui.components.ticket_row import GroupHeader, TicketListRow
from ticketboard.ui.helpers import describe_clause

QUICK_FILTER_FIELDS = ["status", "type", "priority", "tag", "assignee"]


def ticket_indices(rows: list[FlatRow]) -> dict[int, int]:
    """Row position -> index in the visible ticket order (headers skipped)."""
    mapping: dict[int, int] = {}
    for pos, row in enumerate(rows):
        if row.kind == "ticket":
            mapping[pos] = len(mapping)
    return mapping


def dismiss_dialog(page: ft.Page, dialog) -> None:
    """Close dialog and drop it from the page overlay."""
    if dialog is None:
        return None
    dialog.open = False
    for i, control in enumerate(page.overlay):
        if control is dialog:
            del page.overlay[i]
            break
    return None


def show_error_dialog(page: ft.Page, exc: Exception, previous=None) -> ft.AlertDialog:
    # Only one error dialog is ever kept in the overlay
    dismiss_dialog(page, previous)
    dialog = ft.AlertDialog(
        title=ft.Text("Something went wrong"),
        content=ft.Text(f"Details: {exc}"),
        open=True,
    )
    page.overlay.append(dialog)
    return dialog


def build_list_view(
    page: ft.Page,
    state,
    rows: list[FlatRow],
    all_tickets: list[Ticket],
    interaction: ListInteraction,
    on_refresh,
    on_bulk_status,
):
    search_task: asyncio.Task | None = None
    index_map = ticket_indices(rows)
    row_of_index = {idx: pos for pos, idx in index_map.items()}
    selection = interaction.selection

    # --- pointer forwarding ---

    def handle_press(index: int, action):
        interaction.mousedown(index, 0, 0, action=action)
        interaction.global_mouseup()
        interaction.click(index, action=action)

    def handle_pan_start(index: int, e: ft.DragStartEvent):
        pos = e.global_position
        interaction.mousedown(index, pos.x, pos.y)

    def handle_pan_update(index: int, e: ft.DragUpdateEvent):
        # rows have a fixed height, so the hovered row is an offset from the start row
        start_row = row_of_index.get(index, 0)
        hovered_row = start_row + int(e.local_position.y // ROW_HEIGHT)
        hovered = index_map.get(hovered_row)
        pos = e.global_position
        interaction.global_mousemove(pos.x, pos.y, hovered)

    def handle_pan_end(_index: int, _e):
        interaction.global_mouseup()

    # --- toolbar ---

    async def _debounced_search(term_snapshot: str):
        # Debounce to avoid rebuilding the list on every keystroke
        try:
            await asyncio.sleep(0.3)
        except asyncio.CancelledError:
            return
        if term_snapshot == state.search:
            on_refresh()

    def on_search(e):
        nonlocal search_task
        state.search = e.control.value or ""
        if search_task and not search_task.done():
            search_task.cancel()

        async def runner(term: str):
            await _debounced_search(term)

        search_task = page.run_task(runner, state.search)

    def on_group_change(e):
        state.set_group_by(e.control.value or None)
        on_refresh()

    def on_sort_click(field: str):
        state.set_sort(field)
        on_refresh()

    def on_toggle_group(key: str):
        state.toggle_group(key)
        on_refresh()

    search_field = ft.TextField(
        prefix_icon=ft.Icons.SEARCH,
        hint_text="Search title or id...",
        value=state.search,
        on_change=on_search,
        border_color="transparent",
        bgcolor=COLOR_CARD,
        color=COLOR_TEXT_MAIN,
        content_padding=ft.Padding.symmetric(horizontal=12, vertical=8),
        text_size=13,
        expand=True,
    )

    group_dropdown = ft.Dropdown(
        value=state.group_by or "",
        options=[ft.dropdown.Option(key="", text="No grouping")]
        + [ft.dropdown.Option(key=g, text=g.capitalize()) for g in GROUP_FIELDS],
        on_select=on_group_change,
        width=160,
        text_size=13,
    )

    sort_buttons = [
        ft.TextButton(
            f"{field} {'↑' if state.sort_dir == 'asc' else '↓'}"
            if state.sort_field == field
            else field,
            on_click=lambda _, f=field: on_sort_click(f),
        )
        for field in SORT_FIELDS
    ]

    toolbar = ft.Row(
        controls=[search_field, group_dropdown, *sort_buttons],
        spacing=8,
        vertical_alignment=ft.CrossAxisAlignment.CENTER,
    )

    # --- filter chips ---

    def on_add_filter(field: str, operator: str, value):
        state.add_filter(field, operator, value)
        on_refresh()

    def on_remove_filter(filter_id: str):
        state.remove_filter(filter_id)
        on_refresh()

    def on_clear_filters(_e):
        state.clear_filters()
        on_refresh()

    chips = [
        ft.Container(
            content=ft.Row(
                controls=[
                    ft.Text(describe_clause(clause), size=12, color=COLOR_TEXT_MAIN),
                    ft.IconButton(
                        icon=ft.Icons.CLOSE,
                        icon_size=14,
                        icon_color=COLOR_TEXT_MUTED,
                        tooltip="Remove filter",
                        on_click=(lambda _e, fid=clause.id: on_remove_filter(fid)),
                    ),
                ],
                spacing=2,
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=ft.Padding.only(left=10),
            bgcolor=COLOR_CARD,
            border=ft.Border.all(1, COLOR_BORDER),
            border_radius=12,
        )
        for clause in state.filters
    ]

    add_items = []
    for field in QUICK_FILTER_FIELDS:
        for value in unique_field_values(all_tickets, field):
            add_items.append(
                ft.PopupMenuItem(
                    content=ft.Text(f"{FIELD_LABELS[field]}: {value}"),
                    on_click=(lambda _e, f=field, v=value: on_add_filter(f, "any_of", [v])),
                )
            )
    for label, days in DATE_PRESETS:
        add_items.append(
            ft.PopupMenuItem(
                content=ft.Text(f"Modified in last {label}"),
                on_click=(lambda _e, d=days: on_add_filter("modified", "last_n_days", d)),
            )
        )

    filter_bar = ft.Row(
        controls=[
            *chips,
            ft.PopupMenuButton(icon=ft.Icons.FILTER_LIST, tooltip="Add filter", items=add_items),
            ft.TextButton("Clear filters", on_click=on_clear_filters, visible=bool(chips)),
        ],
        spacing=6,
        wrap=True,
        vertical_alignment=ft.CrossAxisAlignment.CENTER,
    )

    bulk_bar = ft.Row(
        controls=[
            ft.Text(f"{len(selection)} selected", color=COLOR_PRIMARY, size=12),
            ft.TextButton("Close", on_click=lambda _: on_bulk_status("closed")),
            ft.TextButton("Reopen", on_click=lambda _: on_bulk_status("open")),
            ft.TextButton("Clear", on_click=lambda _: interaction.clear()),
        ],
        visible=bool(selection),
        spacing=8,
    )

    # --- rows ---

    controls = []
    for pos, row in enumerate(rows):
        if row.kind == "group-header":
            controls.append(
                GroupHeader(
                    row.group,
                    collapsed=row.group.key in state.collapsed_groups,
                    on_toggle=on_toggle_group,
                )
            )
            continue
        controls.append(
            TicketListRow(
                row.ticket,
                index=index_map[pos],
                selected=row.ticket.id in selection,
                on_press=handle_press,
                on_pan_start=handle_pan_start,
                on_pan_update=handle_pan_update,
                on_pan_end=handle_pan_end,
                on_context=interaction.contextmenu,
            )
        )

    if not controls:
        controls = [
            ft.Container(
                content=ft.Text("No tickets match the current filters", color=COLOR_TEXT_MUTED),
                alignment=ft.Alignment.CENTER,
                padding=60,
            )
        ]

    return ft.View(
        route="/",
        bgcolor=COLOR_BG,
        padding=16,
        appbar=ft.AppBar(
            title=ft.Text(APP_TITLE, color=COLOR_TEXT_MAIN, weight=ft.FontWeight.BOLD, size=18),
            bgcolor=COLOR_BG,
            automatically_imply_leading=False,
        ),
        controls=[
            toolbar,
            filter_bar,
            bulk_bar,
            ft.ListView(controls=controls, expand=True, item_extent=ROW_HEIGHT),
        ],
    )
