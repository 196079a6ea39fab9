import flet as ft
from ticketboard.config import (
    BORDER_RADIUS_CARD,
    COLOR_BORDER,
    COLOR_CARD,
    COLOR_CARD_SELECTED,
    COLOR_PRIMARY,
    COLOR_TEXT_MAIN,
    COLOR_TEXT_MUTED,
    ROW_HEIGHT,
)
from ticketboard.domain.models import Ticket, TicketGroup
from ticketboard.interaction.list_interaction import ACTION_CHECKBOX, ACTION_STATUS
from ticketboard.ui.helpers import priority_label, status_color, status_label


class TicketListRow(ft.Container):
    """One ticket row. Pointer events are forwarded as (index, action)."""

    def __init__(
        self,
        ticket: Ticket,
        index: int,
        selected: bool,
        on_press,
        on_pan_start,
        on_pan_update,
        on_pan_end,
        on_context,
    ):
        super().__init__()
        self.ticket = ticket
        self.index = index
        self.selected = selected
        self.on_press_callback = on_press
        self.on_context_callback = on_context

        self.height = ROW_HEIGHT
        self.bgcolor = COLOR_CARD_SELECTED if selected else COLOR_CARD
        self.border_radius = BORDER_RADIUS_CARD
        self.border = ft.Border.only(bottom=ft.BorderSide(1, COLOR_BORDER))
        self.padding = ft.Padding.symmetric(horizontal=12)

        self.content = ft.GestureDetector(
            content=self._build_content(),
            on_pan_start=lambda e: on_pan_start(self.index, e),
            on_pan_update=lambda e: on_pan_update(self.index, e),
            on_pan_end=lambda e: on_pan_end(self.index, e),
            on_secondary_tap=lambda _: self.on_context_callback(self.index),
        )

    def _affordance(self, control, action: str | None):
        return ft.Container(
            content=control,
            on_click=lambda _: self.on_press_callback(self.index, action),
        )

    def _build_content(self):
        ticket = self.ticket
        checkbox = ft.Icon(
            ft.Icons.CHECK_BOX if self.selected else ft.Icons.CHECK_BOX_OUTLINE_BLANK,
            size=16,
            color=COLOR_PRIMARY if self.selected else COLOR_TEXT_MUTED,
        )
        status_dot = ft.Container(
            width=10,
            height=10,
            border_radius=5,
            bgcolor=status_color(ticket.status),
            tooltip=status_label(ticket.status),
        )
        tags = [
            ft.Container(
                content=ft.Text(tag, size=10, color=COLOR_PRIMARY),
                padding=ft.Padding.symmetric(horizontal=6, vertical=1),
                border_radius=8,
                bgcolor="#172554",
            )
            for tag in (ticket.tags or [])[:3]
        ]
        return ft.Row(
            controls=[
                self._affordance(checkbox, ACTION_CHECKBOX),
                self._affordance(status_dot, ACTION_STATUS),
                ft.Text(ticket.id, size=11, color=COLOR_TEXT_MUTED, width=80),
                ft.Container(
                    content=ft.Text(
                        ticket.title,
                        size=13,
                        color=COLOR_TEXT_MAIN,
                        max_lines=1,
                        overflow=ft.TextOverflow.ELLIPSIS,
                    ),
                    expand=True,
                    on_click=lambda _: self.on_press_callback(self.index, None),
                ),
                *tags,
                ft.Text(priority_label(ticket.priority), size=11, color=COLOR_TEXT_MUTED),
                ft.Text(ticket.assignee or "", size=11, color=COLOR_TEXT_MUTED, width=80),
            ],
            spacing=10,
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
        )


class GroupHeader(ft.Container):
    def __init__(self, group: TicketGroup, collapsed: bool, on_toggle):
        super().__init__()
        self.height = ROW_HEIGHT
        self.padding = ft.Padding.symmetric(horizontal=8)
        self.on_click = lambda _: on_toggle(group.key)
        self.content = ft.Row(
            controls=[
                ft.Icon(
                    ft.Icons.CHEVRON_RIGHT if collapsed else ft.Icons.EXPAND_MORE,
                    size=16,
                    color=COLOR_TEXT_MUTED,
                ),
                ft.Text(group.label, size=13, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN),
                ft.Text(str(len(group.tickets)), size=11, color=COLOR_TEXT_MUTED),
            ],
            spacing=8,
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
        )
