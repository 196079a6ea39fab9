"""
tag_service.py - Tag helpers
Single responsibility: normalize tags and compute bulk tag toggles.
"""
import re

from ticketboard.domain.models import Ticket


def normalize_tag(tag: str) -> str:
    return re.sub(r"\s+", "-", tag.strip().lower())


def normalize_tags(tags: list[str] | None) -> list[str]:
    if not tags:
        return []
    seen = set()
    normalized: list[str] = []
    for raw in tags:
        name = normalize_tag(raw)
        if not name or name in seen:
            continue
        seen.add(name)
        normalized.append(name)
    return normalized


def toggle_tag_for_tickets(tickets: list[Ticket], ids: list[str], tag: str) -> dict[str, list[str]]:
    """New tag lists for ids: remove the tag if all have it, else add where missing."""
    by_id = {t.id: t for t in tickets}
    present = [by_id[i] for i in ids if i in by_id]
    all_have = all(tag in (t.tags or []) for t in present)

    result: dict[str, list[str]] = {}
    for t in present:
        current = list(t.tags or [])
        if all_have:
            result[t.id] = [x for x in current if x != tag]
        else:
            result[t.id] = current if tag in current else current + [tag]
    return result
