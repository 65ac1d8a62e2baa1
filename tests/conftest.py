"""
Pytest configuration and shared fixtures.
"""

import itertools
import logging
from typing import List, Optional, Tuple

import pytest

from graph_arena.config import EngineSettings
from graph_arena.models import Edge, GraphModel, Node

# Configure logging for tests
logging.basicConfig(level=logging.INFO)

# A->C(3), C->E(2), E->F(2), A->B(1), B->D(4), D->F(5)
EXAMPLE_EDGES = [
    ("A", "C", 3),
    ("C", "E", 2),
    ("E", "F", 2),
    ("A", "B", 1),
    ("B", "D", 4),
    ("D", "F", 5),
]


def make_graph(
    edges: List[Tuple[str, str, float]],
    start: str,
    goal: str,
    required: Tuple[str, ...] = (),
    node_ids: Optional[List[str]] = None,
) -> GraphModel:
    """Build a GraphModel from (source, target, weight) triples."""
    if node_ids is None:
        node_ids = sorted({node_id for edge in edges for node_id in edge[:2]} | {start, goal, *required})
    return GraphModel(
        nodes=tuple(Node(id=node_id, label=node_id) for node_id in node_ids),
        edges=tuple(Edge(id=f"e{i}", source=u, target=v, weight=w) for i, (u, v, w) in enumerate(edges)),
        start_node_id=start,
        goal_node_id=goal,
        required_node_ids=required,
    )


def brute_force_weight(graph: GraphModel) -> float:
    """Cheapest start -> goal route through every required node, by trying every visiting order."""
    from graph_arena.solver import floyd_warshall

    table = floyd_warshall(graph.adjacency)
    index = graph.index_of
    start, goal = index(graph.start_node_id), index(graph.goal_node_id)
    required = [index(node_id) for node_id in graph.effective_required_node_ids]

    best = float("inf")
    for order in itertools.permutations(required):
        stops = [start, *order, goal]
        best = min(best, sum(table.distances[a][b] for a, b in zip(stops, stops[1:])))
    return best


@pytest.fixture
def example_graph() -> GraphModel:
    """The six-node example graph from the game's tutorial, A -> F."""
    return make_graph(EXAMPLE_EDGES, start="A", goal="F")


@pytest.fixture
def example_graph_with_required() -> GraphModel:
    """The tutorial graph where the route must pass through E."""
    return make_graph(EXAMPLE_EDGES, start="A", goal="F", required=("E",))


@pytest.fixture
def detour_graph() -> GraphModel:
    """
    A -> F is cheapest directly, but the required node D forces a detour.

    A->F(2), A->B(1), B->D(1), D->F(1), A->D(5)
    """
    return make_graph(
        [("A", "F", 2), ("A", "B", 1), ("B", "D", 1), ("D", "F", 1), ("A", "D", 5), ("F", "B", 9)],
        start="A",
        goal="F",
        required=("D",),
    )


@pytest.fixture
def small_settings() -> EngineSettings:
    """Settings that force Dijkstra on anything bigger than three nodes."""
    return EngineSettings(all_pairs_threshold=3, max_retries=25)
