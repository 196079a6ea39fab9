"""
linkify.py - Find ticket ids in free text.
"""

import re
from dataclasses import dataclass

# Broad net for anything shaped like a ticket id: 1-5 alnum, dash, 3-5 alnum.
# Candidates are verified against the known ids before being linked.
_TICKET_ID_PATTERN = r"\b([a-z0-9]{1,5}-[a-z0-9]{3,5})\b"


@dataclass(frozen=True)
class TicketIdToken:
    text: str
    is_ticket_id: bool


def find_ticket_ids(text: str) -> list[tuple[int, int, str]]:
    """Return (start, end, candidate) spans for every id-shaped substring."""
    if not text:
        return []
    # fresh matcher per call; no scanner state is shared between callers
    matcher = re.compile(_TICKET_ID_PATTERN, re.IGNORECASE)
    return [(m.start(1), m.end(1), m.group(1)) for m in matcher.finditer(text)]


def tokenize_ticket_ids(text: str, known_ids: set[str]) -> list[TicketIdToken]:
    """Split text into plain and verified ticket-id tokens."""
    if not known_ids or not text:
        return [TicketIdToken(text=text, is_ticket_id=False)]

    tokens: list[TicketIdToken] = []
    last = 0
    for start, end, candidate in find_ticket_ids(text):
        if candidate not in known_ids:
            continue
        if start > last:
            tokens.append(TicketIdToken(text=text[last:start], is_ticket_id=False))
        tokens.append(TicketIdToken(text=candidate, is_ticket_id=True))
        last = end
    if last < len(text):
        tokens.append(TicketIdToken(text=text[last:], is_ticket_id=False))
    return tokens or [TicketIdToken(text=text, is_ticket_id=False)]


def linkify_ticket_ids(text: str, known_ids: set[str]) -> str:
    """Replace known ticket ids with Markdown links ([t-123](ticket://t-123))."""
    return "".join(
        f"[{tok.text}](ticket://{tok.text})" if tok.is_ticket_id else tok.text
        for tok in tokenize_ticket_ids(text, known_ids)
    )
