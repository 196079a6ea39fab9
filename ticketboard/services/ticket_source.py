"""
ticket_source.py - Ticket loading
Single responsibility: read the ticket snapshot written by the external store.
"""
import json
import logging
import os

from ticketboard.config import TICKETS_PATH
from ticketboard.domain.models import Ticket

logger = logging.getLogger(__name__)


def parse_tickets(data) -> list[Ticket]:
    if isinstance(data, dict):
        data = data.get("tickets", [])
    if not isinstance(data, list):
        raise ValueError("Ticket payload must be a list or {'tickets': [...]}")
    tickets: list[Ticket] = []
    seen: set[str] = set()
    for raw in data:
        ticket = Ticket.from_dict(raw)
        if ticket.id in seen:
            logger.warning("Duplicate ticket id %s; keeping the first", ticket.id)
            continue
        seen.add(ticket.id)
        tickets.append(ticket)
    return tickets


def load_tickets(path: str | None = None) -> list[Ticket]:
    path = path or TICKETS_PATH
    if not os.path.exists(path):
        logger.warning("Ticket file not found: %s", path)
        return []
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse ticket file %s: %s", path, e)
        raise ValueError(f"Malformed ticket file: {path}") from e
    tickets = parse_tickets(data)
    logger.info("Loaded %d tickets from %s", len(tickets), path)
    return tickets
