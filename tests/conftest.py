from datetime import datetime, timezone

import pytest

from ticketboard.domain.models import Ticket

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_ticket(id: str, **kwargs) -> Ticket:
    kwargs.setdefault("title", f"Ticket {id}")
    return Ticket(id=id, **kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def ten_tickets():
    return [make_ticket(f"t-{i}", priority=i % 4) for i in range(10)]
