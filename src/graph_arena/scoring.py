"""
Validation and scoring of player-submitted paths.
"""

import logging
from typing import Sequence

from graph_arena.exceptions import InvalidPathError
from graph_arena.models import GraphModel, PathCheck, ScoreResult

logger = logging.getLogger(__name__)


def validate_path(graph: GraphModel, path: Sequence[str]) -> PathCheck:
    """
    Check that a path is a legal walk from the start node.

    A path that stops before the goal is reported as incomplete, not invalid.

    Raises:
        InvalidPathError: If the path is empty, does not begin at the start node,
            names an unknown node, or uses a move with no edge in that direction
    """
    if not path:
        raise InvalidPathError("Path is empty")
    if path[0] != graph.start_node_id:
        raise InvalidPathError(
            f"Path must begin at start node '{graph.start_node_id}', not '{path[0]}'",
            node_id=path[0],
        )

    for position, node_id in enumerate(path):
        if not graph.has_node(node_id):
            raise InvalidPathError(f"Unknown node '{node_id}' at position {position}", node_id=node_id)

    for a, b in zip(path, path[1:]):
        if graph.edge_weight(a, b) is None:
            raise InvalidPathError(f"Illegal move: there is no edge from '{a}' to '{b}'", from_node_id=a, to_node_id=b)

    visited = set(path)
    missing = [node_id for node_id in graph.effective_required_node_ids if node_id not in visited]

    return PathCheck(
        is_complete=path[-1] == graph.goal_node_id,
        satisfies_required_nodes=not missing,
        missing_required_node_ids=missing,
    )


def path_weight(graph: GraphModel, path: Sequence[str]) -> float:
    """
    Total weight of a validated path, taking the cheapest edge for each move.

    The sum is taken over exact weights and rounded to float once, so any two
    walks with the same true total get the same float.
    """
    return float(sum(graph.edge_weight(a, b) for a, b in zip(path, path[1:])))


def score_path(graph: GraphModel, path: Sequence[str], check: PathCheck, optimal_weight: float) -> ScoreResult:
    """
    Compare a validated path against the optimum.

    `optimal_weight` must be the optimum for the kind of route submitted (with or
    without required nodes) so that it is a true lower bound on a complete path.
    """
    submitted = path_weight(graph, path)

    if not check.is_complete:
        return ScoreResult(
            submitted_weight=submitted,
            optimal_weight=optimal_weight,
            weight_delta=None,
            is_optimal=False,
            satisfies_required_nodes=check.satisfies_required_nodes,
            is_complete=False,
            missing_required_node_ids=check.missing_required_node_ids,
        )

    delta = submitted - optimal_weight
    logger.debug(f"Scored path {' -> '.join(path)}: {submitted} vs optimum {optimal_weight}")

    return ScoreResult(
        submitted_weight=submitted,
        optimal_weight=optimal_weight,
        weight_delta=delta,
        is_optimal=delta == 0,
        satisfies_required_nodes=check.satisfies_required_nodes,
        missing_required_node_ids=check.missing_required_node_ids,
    )
