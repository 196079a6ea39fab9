"""
graph_service.py - Dependency graph adapter
Single responsibility: derive nodes/edges from ticket deps and links and hand
them to an injected layout function. The layout math itself lives outside.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable

from ticketboard.config import NODE_HEIGHT, NODE_WIDTH
from ticketboard.domain.models import Ticket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphNode:
    id: str
    width: float = NODE_WIDTH
    height: float = NODE_HEIGHT


@dataclass(frozen=True)
class GraphEdge:
    from_id: str
    to_id: str
    type: str  # "dep" | "link"


@dataclass
class LayoutNode:
    ticket: Ticket
    x: float
    y: float
    width: float
    height: float


@dataclass
class LayoutEdge:
    from_id: str
    to_id: str
    type: str
    points: list[tuple[float, float]] = field(default_factory=list)


@dataclass
class GraphLayout:
    nodes: list[LayoutNode]
    edges: list[LayoutEdge]
    width: float
    height: float


# layout_fn(nodes, edges) -> (positions by id, points by (from, to), width, height)
LayoutFn = Callable[
    [list[GraphNode], list[GraphEdge]],
    tuple[dict[str, tuple[float, float]], dict[tuple[str, str], list[tuple[float, float]]], float, float],
]


def build_graph(tickets: list[Ticket]) -> tuple[list[GraphNode], list[GraphEdge]]:
    ids = {t.id for t in tickets}
    nodes = [GraphNode(id=t.id) for t in tickets]

    edges: list[GraphEdge] = []
    connected: set[frozenset[str]] = set()
    for t in tickets:
        for dep in t.deps or []:
            if dep in ids:
                edges.append(GraphEdge(from_id=t.id, to_id=dep, type="dep"))
                connected.add(frozenset((t.id, dep)))
        for link in t.links or []:
            if link not in ids:
                continue
            # links are symmetric in concept; one edge per pair
            pair = frozenset((t.id, link))
            if pair in connected:
                continue
            edges.append(GraphEdge(from_id=t.id, to_id=link, type="link"))
            connected.add(pair)
    return nodes, edges


def compute_layout(tickets: list[Ticket], layout_fn: LayoutFn) -> GraphLayout:
    nodes, edges = build_graph(tickets)
    positions, edge_points, width, height = layout_fn(nodes, edges)

    layout_nodes = []
    for t, node in zip(tickets, nodes):
        if t.id not in positions:
            logger.warning("Layout returned no position for %s; placing at origin", t.id)
        x, y = positions.get(t.id, (0.0, 0.0))
        layout_nodes.append(LayoutNode(ticket=t, x=x, y=y, width=node.width, height=node.height))

    layout_edges = [
        LayoutEdge(
            from_id=e.from_id,
            to_id=e.to_id,
            type=e.type,
            points=list(edge_points.get((e.from_id, e.to_id), [])),
        )
        for e in edges
    ]
    return GraphLayout(nodes=layout_nodes, edges=layout_edges, width=width, height=height)
