"""
board_service.py - Saved views and board columns
Single responsibility: model saved list/board views and split tickets into
board columns where the leftmost matching column claims a ticket.
"""
from dataclasses import dataclass, field

from ticketboard.config import DEFAULT_SORT_DIR, DEFAULT_SORT_FIELD
from ticketboard.domain.filters import FilterClause, FilterSet
from ticketboard.domain.models import Ticket
from ticketboard.services.filter_service import apply_filters_and_sort


@dataclass
class SavedList:
    name: str
    filters: FilterSet = field(default_factory=list)
    sort_field: str = DEFAULT_SORT_FIELD
    sort_dir: str = DEFAULT_SORT_DIR

    @classmethod
    def from_dict(cls, raw: dict) -> "SavedList":
        if not isinstance(raw, dict):
            raise ValueError(f"Saved list must be a mapping, got {type(raw).__name__}")
        return cls(
            name=str(raw.get("name") or ""),
            filters=[FilterClause.from_dict(c) for c in raw.get("filters") or []],
            sort_field=raw.get("sortField") or DEFAULT_SORT_FIELD,
            sort_dir=raw.get("sortDir") or DEFAULT_SORT_DIR,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "filters": [c.to_dict() for c in self.filters],
            "sortField": self.sort_field,
            "sortDir": self.sort_dir,
        }


@dataclass
class SavedView:
    id: str
    name: str
    mode: str = "list"  # "list" | "board"
    list_view: SavedList | None = None
    columns: list[SavedList] = field(default_factory=list)
    # (field, dir) applied to every column when set
    board_sort: tuple[str, str] | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> "SavedView":
        if not isinstance(raw, dict):
            raise ValueError(f"Saved view must be a mapping, got {type(raw).__name__}")
        board_sort = raw.get("boardSort")
        if board_sort and not isinstance(board_sort, dict):
            raise ValueError(f"boardSort must be a mapping, got {type(board_sort).__name__}")
        return cls(
            id=str(raw.get("id") or ""),
            name=str(raw.get("name") or ""),
            mode=raw.get("mode") or "list",
            list_view=SavedList.from_dict(raw["list"]) if raw.get("list") else None,
            columns=[SavedList.from_dict(c) for c in raw.get("columns") or []],
            board_sort=(
                (board_sort.get("field") or DEFAULT_SORT_FIELD, board_sort.get("dir") or DEFAULT_SORT_DIR)
                if board_sort
                else None
            ),
        )

    def to_dict(self) -> dict:
        data: dict = {"id": self.id, "name": self.name, "mode": self.mode}
        if self.list_view is not None:
            data["list"] = self.list_view.to_dict()
        if self.columns:
            data["columns"] = [c.to_dict() for c in self.columns]
        if self.board_sort:
            data["boardSort"] = {"field": self.board_sort[0], "dir": self.board_sort[1]}
        return data


def board_columns(
    tickets: list[Ticket],
    columns: list[SavedList],
    sort_override: tuple[str, str] | None = None,
) -> list[list[Ticket]]:
    claimed: set[str] = set()
    result: list[list[Ticket]] = []
    for col in columns:
        sort_field, sort_dir = sort_override or (col.sort_field, col.sort_dir)
        matched = apply_filters_and_sort(
            [t for t in tickets if t.id not in claimed],
            col.filters,
            sort_field,
            sort_dir,
        )
        claimed.update(t.id for t in matched)
        result.append(matched)
    return result
