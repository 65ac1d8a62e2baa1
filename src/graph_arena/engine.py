"""
The three operations the rest of the application calls:

- generate_graph: build a random puzzle graph
- compute_optimal_path: find the best route (through any required nodes)
- evaluate_submission: validate and score a player's route
"""

import logging
from typing import Optional, Sequence

from graph_arena.config import EngineSettings
from graph_arena.exceptions import InvalidPathError
from graph_arena.generator import generate_graph
from graph_arena.models import GraphModel, OptimalPath, ScoreResult
from graph_arena.router import RequiredNodeRouter
from graph_arena.scoring import path_weight, score_path, validate_path
from graph_arena.solver import ShortestPathSolver

logger = logging.getLogger(__name__)

__all__ = ["generate_graph", "compute_optimal_path", "evaluate_submission"]


def compute_optimal_path(
    graph: GraphModel,
    ignore_required: bool = False,
    settings: Optional[EngineSettings] = None,
) -> OptimalPath:
    """
    Compute the minimum-weight start -> goal route.

    Args:
        graph: The puzzle graph
        ignore_required: Skip the required nodes and return the plain shortest path
        settings: Engine settings (defaults to the global settings)

    Raises:
        UnreachableGoalError: If no finite-weight route exists
    """
    if ignore_required and graph.effective_required_node_ids:
        graph = graph.model_copy(update={"required_node_ids": ()})
    router = RequiredNodeRouter(ShortestPathSolver(settings))
    optimum = router.route(graph)
    logger.debug(f"Optimal path {' -> '.join(optimum.path)} (weight {optimum.total_weight}, {optimum.strategy})")
    return optimum


def _matches_graph(graph: GraphModel, optimum: OptimalPath) -> bool:
    """Whether a cached optimum is a full route on this graph with the weight it claims."""
    try:
        check = validate_path(graph, optimum.path)
    except InvalidPathError:
        return False
    return (
        check.is_complete
        and check.satisfies_required_nodes
        and path_weight(graph, optimum.path) == optimum.total_weight
    )


def evaluate_submission(
    graph: GraphModel,
    submitted_path: Sequence[str],
    optimum: Optional[OptimalPath] = None,
    settings: Optional[EngineSettings] = None,
) -> ScoreResult:
    """
    Validate a player's path and score it against the optimum.

    Args:
        graph: The puzzle graph
        submitted_path: Node ids chosen by the player, starting at the start node
        optimum: Previously computed optimum for this graph, to avoid solving again.
            It is checked against the graph and replaced when it does not hold up.
        settings: Engine settings (defaults to the global settings)

    Raises:
        InvalidPathError: If the path is not a legal walk in the graph
        UnreachableGoalError: If the graph has no route to compare against
    """
    check = validate_path(graph, submitted_path)

    if optimum is not None and not _matches_graph(graph, optimum):
        logger.warning("Ignoring a supplied optimum that is not a route of this graph")
        optimum = None

    if optimum is None:
        optimum = compute_optimal_path(graph, settings=settings)
    elif check.is_complete and check.satisfies_required_nodes and path_weight(graph, submitted_path) < optimum.total_weight:
        logger.warning("Supplied optimum is beaten by the submission; solving again")
        optimum = compute_optimal_path(graph, settings=settings)

    # A route that skips required nodes is compared with the plain shortest path,
    # the only optimum that bounds it from below
    optimal_weight = optimum.total_weight
    if not check.satisfies_required_nodes:
        optimal_weight = compute_optimal_path(graph, ignore_required=True, settings=settings).total_weight

    result = score_path(graph, submitted_path, check, optimal_weight)
    logger.info(
        f"Scored submission: weight {result.submitted_weight} vs {result.optimal_weight} "
        f"(complete={result.is_complete}, optimal={result.is_optimal})"
    )
    return result
